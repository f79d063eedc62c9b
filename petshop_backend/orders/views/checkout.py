# orders/views/checkout.py

"""
CHECKOUT (authenticated)

POST /api/orders/checkout/

Body (all optional):
{
  "payment_method": "cod" | "wallet" | "online",
  "wallet_amount": "12.50",
  "address_id": "...",
  "customer_name": "...", "customer_email": "...", "customer_phone": "...",
  "shipping_address": "...",
  "notes": "..."
}

Returns the created order (201).
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.views.public import session_id_from
from orders.serializers import CheckoutInputSerializer, OrderSerializer
from orders.services.checkout_orchestrator import checkout_cart
from orders.services.exceptions import OrderServiceError
from orders.views.common import service_error_response
from promotions.services.coupons import CouponError
from wallet.services.exceptions import WalletError


class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Orders"],
        request=CheckoutInputSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Empty cart / invalid coupon / wallet coverage / address"),
            403: OpenApiResponse(description="Member-exclusive product without membership"),
            409: OpenApiResponse(description="Insufficient stock / coupon usage conflict"),
        },
    )
    def post(self, request):
        s = CheckoutInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        customer = {
            key: data.get(key, "")
            for key in ("customer_name", "customer_email", "customer_phone", "shipping_address")
        }

        try:
            order = checkout_cart(
                user=request.user,
                payment_method=data.get("payment_method"),
                wallet_amount=data.get("wallet_amount"),
                address_id=data.get("address_id"),
                customer=customer,
                notes=data.get("notes", ""),
                session_id=session_id_from(request),
            )
        except (OrderServiceError, CouponError, WalletError) as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
