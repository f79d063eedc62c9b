# catalog/views/public.py
"""
PUBLIC CATALOG (ONLINE STORE)

GET /api/catalog/products/                 list (filters + ordering + pagination)
GET /api/catalog/products/<id-or-slug>/    detail (records a "view" event)
GET /api/catalog/categories/               active category tree
GET /api/catalog/brands/                   active brands

Rules:
- AllowAny (public), throttled against scraping
- Only active products are ever exposed
"""

from __future__ import annotations

import uuid

from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from catalog.filters import ProductFilter
from catalog.models import Brand, Category, Product, ProductEvent
from catalog.serializers import BrandSerializer, CategoryTreeSerializer, ProductSerializer
from catalog.services.recommendations import track_event


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


def session_id_from(request) -> str:
    return (request.headers.get("X-Session-Id") or "").strip()[:64]


class ProductListView(generics.ListAPIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]
    serializer_class = ProductSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ProductFilter
    ordering_fields = ["price", "rating", "created_at", "name"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return Product.objects.filter(is_active=True).select_related("category", "brand")


class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(
        tags=["Public"],
        responses={200: ProductSerializer, 404: OpenApiResponse(description="Not found")},
        description="Product detail by id or slug.",
    )
    def get(self, request, key: str):
        qs = Product.objects.filter(is_active=True).select_related("category", "brand")
        try:
            product = get_object_or_404(qs, pk=uuid.UUID(str(key)))
        except ValueError:
            product = get_object_or_404(qs, slug=key)

        track_event(
            product=product,
            event_type=ProductEvent.EventType.VIEW,
            user=request.user,
            session_id=session_id_from(request),
        )
        return Response(ProductSerializer(product).data)


class CategoryTreeView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(tags=["Public"], responses={200: CategoryTreeSerializer(many=True)})
    def get(self, request):
        roots = (
            Category.objects.filter(is_active=True, parent__isnull=True)
            .prefetch_related(Prefetch("children", queryset=Category.objects.order_by("sort_order", "name")))
        )
        return Response(CategoryTreeSerializer(roots, many=True).data)


class BrandListView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(tags=["Public"], responses={200: BrandSerializer(many=True)})
    def get(self, request):
        return Response(BrandSerializer(Brand.objects.filter(is_active=True), many=True).data)
