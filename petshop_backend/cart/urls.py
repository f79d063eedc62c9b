# cart/urls.py

from django.urls import path

from cart.views import (
    CartCouponView,
    CartItemDetailView,
    CartItemsView,
    CartView,
    WishlistItemView,
    WishlistMoveToCartView,
    WishlistView,
)

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("items/", CartItemsView.as_view(), name="cart-items"),
    path("items/<uuid:item_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
    path("coupon/", CartCouponView.as_view(), name="cart-coupon"),
    # ---------------- WISHLIST ----------------
    path("wishlist/", WishlistView.as_view(), name="wishlist"),
    path("wishlist/<uuid:product_id>/", WishlistItemView.as_view(), name="wishlist-item"),
    path(
        "wishlist/<uuid:product_id>/move-to-cart/",
        WishlistMoveToCartView.as_view(),
        name="wishlist-move-to-cart",
    ),
]
