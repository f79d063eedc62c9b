from .cart import CartCouponView, CartItemDetailView, CartItemsView, CartView
from .wishlist import WishlistItemView, WishlistMoveToCartView, WishlistView

__all__ = [
    "CartCouponView",
    "CartItemDetailView",
    "CartItemsView",
    "CartView",
    "WishlistItemView",
    "WishlistMoveToCartView",
    "WishlistView",
]
