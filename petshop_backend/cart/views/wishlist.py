# cart/views/wishlist.py

"""
WISHLIST API (authenticated)

GET    /api/cart/wishlist/
POST   /api/cart/wishlist/                             {product}  (idempotent)
DELETE /api/cart/wishlist/<product_id>/
POST   /api/cart/wishlist/<product_id>/move-to-cart/   {quantity=1}
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.serializers import (
    MoveToCartSerializer,
    WishlistAddSerializer,
    WishlistItemSerializer,
    cart_payload,
)
from cart.services import cart_service
from cart.services.exceptions import CartError
from cart.views.cart import error_response
from catalog.views.public import session_id_from


class WishlistView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], responses={200: WishlistItemSerializer(many=True)})
    def get(self, request):
        items = cart_service.wishlist_items(request.user)
        return Response(WishlistItemSerializer(items, many=True).data)

    @extend_schema(tags=["Wishlist"], request=WishlistAddSerializer, responses={201: WishlistItemSerializer})
    def post(self, request):
        s = WishlistAddSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            item, created = cart_service.wishlist_add(
                user=request.user,
                product_id=s.validated_data["product"],
                session_id=session_id_from(request),
            )
        except CartError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return Response(
            WishlistItemSerializer(item).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class WishlistItemView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"])
    def delete(self, request, product_id):
        if not cart_service.wishlist_remove(user=request.user, product_id=product_id):
            return error_response(
                code="WISHLIST_ITEM_NOT_FOUND",
                message="Product is not in the wishlist",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistMoveToCartView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], request=MoveToCartSerializer)
    def post(self, request, product_id):
        s = MoveToCartSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            cart_service.move_to_cart(
                user=request.user,
                product_id=product_id,
                quantity=s.validated_data["quantity"],
                session_id=session_id_from(request),
            )
        except CartError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        cart = cart_service.get_active_cart(request.user)
        totals = cart_service.cart_totals(cart, user=request.user)
        return Response(cart_payload(cart, totals))
