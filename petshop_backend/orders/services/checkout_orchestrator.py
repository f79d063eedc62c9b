"""
======================================================
PATH: orders/services/checkout_orchestrator.py
======================================================
CHECKOUT ORCHESTRATOR (CART -> ORDER)

Guarantees:
- Atomic (everything or nothing)
- Cart + product rows locked before any write
- Stock validated BEFORE any decrement
- Prices re-read from the catalog (cart snapshots are never trusted)
- Coupon re-validated and consumed inside the same transaction
- Wallet spend capped by balance and by the tier's usage rate
- Order + items + invoice written, cart cleared and deactivated

Payment:
- cod / online: optional partial wallet spend, rest is collected later
- wallet: the wallet pays the whole grand total or checkout is rejected
- payment_status is "paid" only when the wallet covers the grand total
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction

from cart.models import Cart
from cart.services import pricing
from catalog.models import ProductEvent
from catalog.services.inventory import decrement_stock
from catalog.services.recommendations import track_event
from membership.services.memberships import active_tier, record_order_savings
from membership.tiers import BASE_WALLET_USAGE_RATE
from orders.models import Invoice, Order, OrderItem
from orders.models.order import new_order_number
from orders.services.exceptions import (
    AddressNotFoundError,
    EmptyCartError,
    InvalidPaymentMethodError,
    MembershipRequiredError,
    ProductUnavailableError,
    ShippingAddressRequiredError,
    StockValidationError,
    WalletCoverageError,
)
from promotions.services.coupons import normalize_code, redeem_coupon
from users.models import Address
from users.services.addresses import default_address_for
from wallet.models import WalletTransaction
from wallet.services import ledger

logger = logging.getLogger("orders")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

PAYMENT_METHODS = {Order.PAYMENT_COD, Order.PAYMENT_WALLET, Order.PAYMENT_ONLINE}


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _normalize_payment_method(method) -> str:
    m = (method or Order.PAYMENT_COD).strip().lower()
    if m not in PAYMENT_METHODS:
        raise InvalidPaymentMethodError(f"Unsupported payment method: {method}")
    return m


# ---------------------------------------------------------
# Customer + shipping details
# ---------------------------------------------------------
def resolve_customer(*, user, customer: dict | None = None, address_id=None) -> dict:
    """
    Precedence: explicit fields > chosen saved address > default address > profile.
    """
    customer = customer or {}
    address = None

    if address_id:
        address = Address.objects.filter(pk=address_id, user=user).first()
        if address is None:
            raise AddressNotFoundError("Address not found")
    elif not (customer.get("shipping_address") or "").strip():
        address = default_address_for(user)

    resolved = {
        "customer_name": (customer.get("customer_name") or "").strip()
        or (address.full_name if address else "")
        or user.full_name,
        "customer_email": (customer.get("customer_email") or "").strip() or user.email,
        "customer_phone": (customer.get("customer_phone") or "").strip()
        or (address.phone if address else "")
        or user.phone,
        "shipping_address": (customer.get("shipping_address") or "").strip()
        or (address.as_shipping_text() if address else ""),
    }

    # profile names can run past the order column (first + last, 100 each)
    name_limit = Order._meta.get_field("customer_name").max_length
    resolved["customer_name"] = resolved["customer_name"][:name_limit].strip()

    if not resolved["shipping_address"]:
        raise ShippingAddressRequiredError("A shipping address is required")
    return resolved


# ---------------------------------------------------------
# Wallet allowance
# ---------------------------------------------------------
def max_wallet_spend(*, merchandise_total, balance, usage_rate) -> Decimal:
    cap = (_money(merchandise_total) * Decimal(str(usage_rate))).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return max(ZERO, min(_money(balance), cap))


def wallet_spend_for(*, payment_method: str, requested, grand_total, merchandise_total, balance, usage_rate) -> Decimal:
    if payment_method == Order.PAYMENT_WALLET:
        if _money(balance) < _money(grand_total):
            raise WalletCoverageError(
                "Wallet balance does not cover the order total",
                balance=str(_money(balance)),
                required=str(_money(grand_total)),
            )
        return _money(grand_total)

    requested = _money(requested)
    if requested <= ZERO:
        return ZERO
    return min(requested, max_wallet_spend(merchandise_total=merchandise_total, balance=balance, usage_rate=usage_rate))


# ---------------------------------------------------------
# Checkout
# ---------------------------------------------------------
@transaction.atomic
def checkout_cart(
    *,
    user,
    payment_method=None,
    wallet_amount=None,
    address_id=None,
    customer: dict | None = None,
    notes: str = "",
    session_id: str = "",
) -> Order:
    method = _normalize_payment_method(payment_method)

    # 1) Lock cart
    cart = Cart.objects.select_for_update().filter(user=user, is_active=True).first()
    if cart is None:
        raise EmptyCartError("Cart is empty")

    # 2) Lock items + products
    items = list(cart.items.select_related("product").select_for_update().order_by("added_at"))
    if not items:
        raise EmptyCartError("Cart is empty")

    tier = active_tier(user)

    # 3) Validate everything before any write
    for item in items:
        product = item.product
        if not product.is_active:
            raise ProductUnavailableError(f"{product.name} is no longer available", product_id=str(product.pk))
        if product.stock_quantity < item.quantity:
            raise StockValidationError(
                f"Insufficient stock for {product.name}",
                product_id=str(product.pk),
                requested=item.quantity,
                available=product.stock_quantity,
            )
        if product.is_member_exclusive and tier is None:
            raise MembershipRequiredError(
                f"{product.name} is available to members only",
                product_id=str(product.pk),
            )

    details = resolve_customer(user=user, customer=customer, address_id=address_id)

    order_number = new_order_number()
    lines = [(item.product.price, item.quantity) for item in items]
    subtotal = pricing.subtotal_of(lines)

    # 4) Coupon (consumes one use)
    coupon_code = normalize_code(cart.coupon_code)
    coupon_discount = ZERO
    free_delivery = False
    if coupon_code:
        coupon, coupon_discount = redeem_coupon(coupon_code, subtotal=subtotal, user=user, reference=order_number)
        free_delivery = coupon.is_free_delivery

    totals = pricing.compute_totals(
        lines=lines,
        coupon_code=coupon_code,
        coupon_discount=coupon_discount,
        free_delivery=free_delivery,
        membership_tier=tier.key if tier else None,
        membership_rate=tier.discount_rate if tier else ZERO,
    )

    # 5) Wallet
    wallet = ledger.get_or_create_wallet(user)
    wallet_used = wallet_spend_for(
        payment_method=method,
        requested=wallet_amount,
        grand_total=totals.grand_total,
        merchandise_total=totals.merchandise_total,
        balance=wallet.balance,
        usage_rate=tier.wallet_usage_rate if tier else BASE_WALLET_USAGE_RATE,
    )
    if wallet_used > ZERO:
        ledger.spend(
            user=user,
            amount=wallet_used,
            source=WalletTransaction.SOURCE_ORDER_PAYMENT,
            description=f"Payment for order {order_number}",
            metadata={"order_number": order_number},
            reference=order_number,
        )

    amount_due = _money(totals.grand_total - wallet_used)

    # 6) Order + lines + stock
    order = Order.objects.create(
        order_number=order_number,
        user=user,
        payment_method=method,
        payment_status=Order.PAYMENT_PAID if amount_due == ZERO else Order.PAYMENT_PENDING,
        subtotal=totals.subtotal,
        membership_discount=totals.membership_discount,
        coupon_discount=totals.coupon_discount,
        shipping_fee=totals.shipping_fee,
        merchandise_total=totals.merchandise_total,
        grand_total=totals.grand_total,
        wallet_amount_used=wallet_used,
        amount_due=amount_due,
        coupon_code=coupon_code,
        membership_tier=tier.key if tier else "",
        notes=(notes or "")[:500],
        **details,
    )

    exclusive_units = 0
    for item in items:
        product = item.product
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            product_image=product.image,
            unit_price=product.price,
            quantity=item.quantity,
            is_member_exclusive=product.is_member_exclusive,
        )
        decrement_stock(product=product, quantity=item.quantity, reference=order_number, user=user)
        if product.is_member_exclusive:
            exclusive_units += item.quantity

        track_event(
            product=product,
            event_type=ProductEvent.EventType.PURCHASE,
            user=user,
            session_id=session_id,
            metadata={"order_number": order_number, "quantity": item.quantity},
        )

    # 7) Invoice
    Invoice.objects.create(
        order=order,
        user=user,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        shipping_address=order.shipping_address,
        subtotal=order.subtotal,
        membership_discount=order.membership_discount,
        coupon_discount=order.coupon_discount,
        shipping_fee=order.shipping_fee,
        grand_total=order.grand_total,
        wallet_amount_used=order.wallet_amount_used,
        amount_due=order.amount_due,
        payment_method=order.payment_method,
        currency=settings.STORE_CURRENCY,
    )

    # 8) Membership statistics
    if tier is not None:
        record_order_savings(user=user, saved=totals.membership_discount, exclusive_units=exclusive_units)

    # 9) Close the cart
    cart.items.all().delete()
    cart.coupon_code = ""
    cart.is_active = False
    cart.save(update_fields=["coupon_code", "is_active", "updated_at"])

    logger.info(
        "Order placed",
        extra={
            "order_number": order_number,
            "user_id": str(user.pk),
            "grand_total": str(order.grand_total),
            "wallet_amount_used": str(wallet_used),
            "payment_method": method,
        },
    )
    return order
