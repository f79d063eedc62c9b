# wallet/views/wallet.py

"""
WALLET (authenticated customer)

GET  /api/wallet/                        balance + limits
GET  /api/wallet/transactions/           ledger (paginated, newest first)
POST /api/wallet/redeem/free-delivery/   spend balance for a free-delivery coupon
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from membership.services.memberships import wallet_usage_rate
from promotions.serializers import CouponSerializer
from wallet.models import WalletTransaction
from wallet.serializers import WalletSerializer, WalletTransactionSerializer
from wallet.services import ledger
from wallet.services.exceptions import WalletError
from wallet.services.redemption import redeem_free_delivery_coupon
from wallet.views.common import wallet_error_response


class WalletView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wallet"], responses={200: OpenApiResponse(description="Wallet + limits")})
    def get(self, request):
        wallet = ledger.get_or_create_wallet(request.user)
        return Response(
            {
                "wallet": WalletSerializer(wallet).data,
                "currency": settings.STORE_CURRENCY,
                "limits": {
                    "daily_earning_remaining": str(ledger.daily_remaining(request.user)),
                    "max_daily_earning": str(ledger.max_daily_earning()),
                    "max_wallet_usage_percent": int(wallet_usage_rate(request.user) * 100),
                    "free_delivery_redemption_cost": str(
                        Decimal(str(settings.WALLET_LIMITS["FREE_DELIVERY_REDEMPTION_COST"]))
                    ),
                },
            }
        )


class WalletTransactionListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = WalletTransactionSerializer
    filterset_fields = ["type", "source"]

    def get_queryset(self):
        return WalletTransaction.objects.filter(user=self.request.user).order_by("-created_at")

    @extend_schema(tags=["Wallet"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class RedeemFreeDeliveryView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Wallet"],
        request=None,
        responses={
            201: CouponSerializer,
            400: OpenApiResponse(description="Insufficient wallet balance"),
        },
    )
    def post(self, request):
        try:
            coupon = redeem_free_delivery_coupon(user=request.user)
        except WalletError as exc:
            return wallet_error_response(exc)

        wallet = ledger.get_or_create_wallet(request.user)
        return Response(
            {
                "coupon": CouponSerializer(coupon).data,
                "wallet": WalletSerializer(wallet).data,
            },
            status=status.HTTP_201_CREATED,
        )
