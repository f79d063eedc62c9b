# cart/views/cart.py

"""
CART API (authenticated)

GET    /api/cart/                     cart + totals
DELETE /api/cart/                     clear (drops the coupon too)
POST   /api/cart/items/               {product, quantity=1}
PATCH  /api/cart/items/<item_id>/     {quantity}  (<= 0 removes)
DELETE /api/cart/items/<item_id>/
POST   /api/cart/coupon/              {code}
DELETE /api/cart/coupon/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.serializers import (
    ApplyCouponSerializer,
    CartAddSerializer,
    CartUpdateSerializer,
    cart_payload,
)
from cart.services import cart_service
from cart.services.exceptions import CartError
from catalog.views.public import session_id_from
from promotions.services.coupons import CouponError


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def _cart_response(user, *, http_status=status.HTTP_200_OK):
    cart = cart_service.get_active_cart(user)
    totals = cart_service.cart_totals(cart, user=user)
    return Response(cart_payload(cart, totals), status=http_status)


class CartView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], responses={200: OpenApiResponse(description="Cart with totals")})
    def get(self, request):
        return _cart_response(request.user)

    @extend_schema(tags=["Cart"], responses={200: OpenApiResponse(description="Emptied cart")})
    def delete(self, request):
        cart_service.clear_cart(user=request.user)
        return _cart_response(request.user)


class CartItemsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Cart"],
        request=CartAddSerializer,
        responses={
            201: OpenApiResponse(description="Cart with totals"),
            400: OpenApiResponse(description="Product unavailable"),
            409: OpenApiResponse(description="Out of stock"),
        },
    )
    def post(self, request):
        s = CartAddSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            cart_service.add_item(
                user=request.user,
                product_id=s.validated_data["product"],
                quantity=s.validated_data["quantity"],
                session_id=session_id_from(request),
            )
        except CartError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return _cart_response(request.user, http_status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], request=CartUpdateSerializer)
    def patch(self, request, item_id):
        s = CartUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            cart_service.update_item(user=request.user, item_id=item_id, quantity=s.validated_data["quantity"])
        except CartError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return _cart_response(request.user)

    @extend_schema(tags=["Cart"])
    def delete(self, request, item_id):
        try:
            cart_service.remove_item(user=request.user, item_id=item_id)
        except CartError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return _cart_response(request.user)


class CartCouponView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Cart"],
        request=ApplyCouponSerializer,
        responses={
            200: OpenApiResponse(description="Cart with coupon applied"),
            400: OpenApiResponse(description="Coupon invalid / expired / limit reached / minimum not met"),
        },
    )
    def post(self, request):
        s = ApplyCouponSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            cart_service.apply_coupon(user=request.user, code=s.validated_data["code"])
        except CouponError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return _cart_response(request.user)

    @extend_schema(tags=["Cart"])
    def delete(self, request):
        cart_service.remove_coupon(user=request.user)
        return _cart_response(request.user)
