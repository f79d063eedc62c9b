# cart/services/cart_service.py

"""
======================================================
PATH: cart/services/cart_service.py
======================================================
CART + WISHLIST SERVICES

Cart rules:
- add: default quantity 1, existing line is incremented, unit price refreshed,
  quantity capped at available stock; inactive / out-of-stock products rejected
- update: quantity <= 0 removes the line, otherwise capped at stock
- clear: removes lines AND the applied coupon
- apply_coupon: validated against the current subtotal

Totals are computed by cart.services.pricing; a stored coupon that no
longer validates is reported as coupon_error and contributes nothing.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from cart.models import Cart, CartItem, WishlistItem
from cart.services import pricing
from cart.services.exceptions import (
    CartItemNotFoundError,
    InvalidQuantityError,
    OutOfStockError,
    ProductUnavailableError,
)
from catalog.models import Product, ProductEvent
from catalog.services.recommendations import track_event
from membership.services.memberships import active_tier
from promotions.services.coupons import CouponError, normalize_code, quote_coupon

logger = logging.getLogger("cart")


# ---------------------------------------------------------
# Cart lookup
# ---------------------------------------------------------
def get_active_cart(user) -> Cart:
    cart = Cart.objects.filter(user=user, is_active=True).first()
    if cart is not None:
        return cart
    try:
        with transaction.atomic():
            return Cart.objects.create(user=user)
    except IntegrityError:
        return Cart.objects.get(user=user, is_active=True)


def _active_product(product_id) -> Product:
    product = Product.objects.filter(pk=product_id, is_active=True).first()
    if product is None:
        raise ProductUnavailableError("Product is not available")
    return product


def _owned_item(user, item_id) -> CartItem:
    item = (
        CartItem.objects.select_related("product", "cart")
        .filter(pk=item_id, cart__user=user, cart__is_active=True)
        .first()
    )
    if item is None:
        raise CartItemNotFoundError("Cart item not found")
    return item


def _to_quantity(value) -> int:
    if isinstance(value, bool):
        raise InvalidQuantityError("quantity must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidQuantityError("quantity must be an integer")


# ---------------------------------------------------------
# Cart mutations
# ---------------------------------------------------------
@transaction.atomic
def add_item(*, user, product_id, quantity=1, session_id: str = "") -> CartItem:
    qty = _to_quantity(quantity)
    if qty < 1:
        raise InvalidQuantityError("quantity must be at least 1")

    product = _active_product(product_id)
    if product.stock_quantity <= 0:
        raise OutOfStockError(f"{product.name} is out of stock")

    cart = get_active_cart(user)
    item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()

    if item is None:
        item = CartItem(cart=cart, product=product, quantity=0)

    item.quantity = min(item.quantity + qty, product.stock_quantity)
    item.unit_price = product.price
    item.save()

    cart.save(update_fields=["updated_at"])

    track_event(
        product=product,
        event_type=ProductEvent.EventType.ADD_TO_CART,
        user=user,
        session_id=session_id,
        metadata={"quantity": qty},
    )
    return item


@transaction.atomic
def update_item(*, user, item_id, quantity):
    """
    Returns the updated line, or None when the line was removed.
    """
    qty = _to_quantity(quantity)
    item = _owned_item(user, item_id)

    if qty <= 0:
        item.delete()
        return None

    item.quantity = min(qty, item.product.stock_quantity)
    if item.quantity <= 0:
        raise OutOfStockError(f"{item.product.name} is out of stock")
    item.save(update_fields=["quantity", "updated_at"])
    return item


def remove_item(*, user, item_id) -> None:
    _owned_item(user, item_id).delete()


@transaction.atomic
def clear_cart(*, user) -> Cart:
    cart = get_active_cart(user)
    cart.items.all().delete()
    cart.coupon_code = ""
    cart.save(update_fields=["coupon_code", "updated_at"])
    return cart


def apply_coupon(*, user, code):
    """
    Validate against the current subtotal and store the code on the cart.
    CouponError propagates to the caller.
    """
    cart = get_active_cart(user)
    lines = [(i.unit_price, i.quantity) for i in cart.items.all()]
    coupon, discount = quote_coupon(code, subtotal=pricing.subtotal_of(lines), user=user)

    cart.coupon_code = coupon.code
    cart.save(update_fields=["coupon_code", "updated_at"])
    logger.info("Coupon applied to cart", extra={"user_id": str(user.pk), "coupon": coupon.code})
    return coupon, discount


def remove_coupon(*, user) -> Cart:
    cart = get_active_cart(user)
    cart.coupon_code = ""
    cart.save(update_fields=["coupon_code", "updated_at"])
    return cart


# ---------------------------------------------------------
# Totals
# ---------------------------------------------------------
def cart_totals(cart: Cart, *, user=None) -> pricing.Totals:
    user = user or cart.user
    lines = [(i.unit_price, i.quantity) for i in cart.items.all()]
    subtotal = pricing.subtotal_of(lines)

    coupon_discount = pricing.ZERO
    free_delivery = False
    coupon_error = None
    code = normalize_code(cart.coupon_code)

    if code:
        try:
            coupon, coupon_discount = quote_coupon(code, subtotal=subtotal, user=user)
            free_delivery = coupon.is_free_delivery
        except CouponError as exc:
            coupon_error = {"code": exc.code, "message": exc.message}
            coupon_discount = pricing.ZERO

    tier = active_tier(user)
    return pricing.compute_totals(
        lines=lines,
        coupon_code=code,
        coupon_discount=coupon_discount,
        free_delivery=free_delivery,
        coupon_error=coupon_error,
        membership_tier=tier.key if tier else None,
        membership_rate=tier.discount_rate if tier else pricing.ZERO,
    )


# ---------------------------------------------------------
# Wishlist
# ---------------------------------------------------------
def wishlist_items(user):
    return WishlistItem.objects.filter(user=user).select_related("product", "product__category", "product__brand")


def wishlist_add(*, user, product_id, session_id: str = "") -> tuple[WishlistItem, bool]:
    product = _active_product(product_id)
    item, created = WishlistItem.objects.get_or_create(user=user, product=product)
    if created:
        track_event(
            product=product,
            event_type=ProductEvent.EventType.WISHLIST,
            user=user,
            session_id=session_id,
        )
    return item, created


def wishlist_remove(*, user, product_id) -> bool:
    deleted, _ = WishlistItem.objects.filter(user=user, product_id=product_id).delete()
    return deleted > 0


@transaction.atomic
def move_to_cart(*, user, product_id, quantity=1, session_id: str = "") -> CartItem:
    if not WishlistItem.objects.filter(user=user, product_id=product_id).exists():
        raise CartItemNotFoundError("Product is not in the wishlist")

    item = add_item(user=user, product_id=product_id, quantity=quantity, session_id=session_id)
    WishlistItem.objects.filter(user=user, product_id=product_id).delete()
    return item
