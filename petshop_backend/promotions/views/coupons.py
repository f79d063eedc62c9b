# promotions/views/coupons.py

"""
COUPONS API

Public:
- POST /api/promotions/coupons/validate/   {code, order_amount}

Staff (coupons.manage):
- /api/promotions/coupons/  CRUD
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from permissions.roles import CAP_COUPONS_MANAGE, HasCapability
from promotions.models import Coupon
from promotions.serializers import CouponSerializer, CouponValidateSerializer
from promotions.services.coupons import CouponError, quote_coupon


class PublicWriteThrottle(AnonRateThrottle):
    scope = "public_write"


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


class CouponValidateView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        tags=["Public"],
        request=CouponValidateSerializer,
        responses={
            200: OpenApiResponse(description="Coupon valid; discount quote"),
            400: OpenApiResponse(description="Coupon invalid / expired / limit reached / minimum not met"),
        },
    )
    def post(self, request):
        s = CouponValidateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            coupon, discount = quote_coupon(
                s.validated_data["code"],
                subtotal=s.validated_data["order_amount"],
                user=request.user,
            )
        except CouponError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return Response(
            {
                "valid": True,
                "code": coupon.code,
                "description": coupon.description,
                "discount_type": coupon.discount_type,
                "discount_amount": str(discount),
                "free_delivery": coupon.is_free_delivery,
            },
            status=status.HTTP_200_OK,
        )


class CouponViewSet(viewsets.ModelViewSet):
    queryset = Coupon.objects.all().order_by("-created_at")
    serializer_class = CouponSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_COUPONS_MANAGE
