from .cart import Cart, CartItem
from .wishlist import WishlistItem

__all__ = ["Cart", "CartItem", "WishlistItem"]
