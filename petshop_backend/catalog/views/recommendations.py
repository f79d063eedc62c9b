# catalog/views/recommendations.py

"""
RECOMMENDATIONS + BEHAVIOUR TRACKING (public)

GET  /api/catalog/recommendations/similar/<product_id>/
GET  /api/catalog/recommendations/frequently-bought/<product_id>/
GET  /api/catalog/recommendations/trending/
GET  /api/catalog/recommendations/for-you/       (user, or X-Session-Id header)
POST /api/catalog/events/                         {product, event_type, metadata}
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.models import Product
from catalog.serializers import RecommendationSerializer, TrackEventSerializer
from catalog.services import recommendations as reco
from catalog.views.public import PublicCatalogThrottle, session_id_from

LIMIT_PARAM = OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, required=False)


def _limit(request, default: int) -> int:
    try:
        value = int(request.query_params.get("limit", default))
    except (TypeError, ValueError):
        return default
    return max(1, min(value, 50))


def _payload(recs):
    return RecommendationSerializer(
        [{"product": r.product, "score": r.score, "reason": r.reason} for r in recs],
        many=True,
    ).data


class _PublicRecoView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]


class SimilarProductsView(_PublicRecoView):
    @extend_schema(tags=["Public"], parameters=[LIMIT_PARAM], responses={200: RecommendationSerializer(many=True)})
    def get(self, request, product_id):
        product = get_object_or_404(Product, pk=product_id, is_active=True)
        return Response(_payload(reco.similar_products(product, limit=_limit(request, reco.DEFAULT_LIMIT))))


class FrequentlyBoughtTogetherView(_PublicRecoView):
    @extend_schema(tags=["Public"], parameters=[LIMIT_PARAM], responses={200: RecommendationSerializer(many=True)})
    def get(self, request, product_id):
        product = get_object_or_404(Product, pk=product_id, is_active=True)
        return Response(_payload(reco.frequently_bought_together(product, limit=_limit(request, 6))))


class TrendingProductsView(_PublicRecoView):
    @extend_schema(tags=["Public"], parameters=[LIMIT_PARAM], responses={200: RecommendationSerializer(many=True)})
    def get(self, request):
        return Response(_payload(reco.trending_products(limit=_limit(request, reco.DEFAULT_LIMIT))))


class PersonalizedRecommendationsView(_PublicRecoView):
    @extend_schema(tags=["Public"], parameters=[LIMIT_PARAM], responses={200: RecommendationSerializer(many=True)})
    def get(self, request):
        recs = reco.personalized_recommendations(
            user=request.user,
            session_id=session_id_from(request),
            limit=_limit(request, reco.DEFAULT_LIMIT),
        )
        return Response(_payload(recs))


class TrackEventView(_PublicRecoView):
    @extend_schema(tags=["Public"], request=TrackEventSerializer, responses={201: dict})
    def post(self, request):
        s = TrackEventSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        event = reco.track_event(
            product=s.validated_data["product"],
            event_type=s.validated_data["event_type"],
            user=request.user,
            session_id=session_id_from(request),
            metadata=s.validated_data.get("metadata") or {},
        )
        return Response({"id": str(event.id), "tracked": True}, status=status.HTTP_201_CREATED)
