# cart/services/pricing.py

"""
======================================================
PATH: cart/services/pricing.py
======================================================
CART / ORDER TOTALS (pure functions, no DB)

- subtotal = sum(unit_price x quantity), 2dp
- item_count = sum(quantity)
- shipping_fee = 0 when the cart is empty, subtotal >= FREE_THRESHOLD,
  or a free_delivery coupon is applied; otherwise BASE_FEE
- coupon_discount clamped to [0, subtotal] (0 for free_delivery)
- membership_discount = subtotal x tier rate, 2dp half-up
- merchandise_total = max(0, subtotal - membership_discount - coupon_discount)
- grand_total = merchandise_total + shipping_fee

Checkout uses the same functions with freshly read catalog prices.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from django.conf import settings

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ShippingRules:
    base_fee: Decimal
    free_threshold: Decimal

    @classmethod
    def from_settings(cls) -> "ShippingRules":
        return cls(
            base_fee=_money(settings.SHIPPING["BASE_FEE"]),
            free_threshold=_money(settings.SHIPPING["FREE_THRESHOLD"]),
        )


@dataclass
class Totals:
    subtotal: Decimal = ZERO
    item_count: int = 0
    shipping_fee: Decimal = ZERO
    coupon_code: str = ""
    coupon_discount: Decimal = ZERO
    free_delivery: bool = False
    coupon_error: Optional[dict] = None
    membership_tier: Optional[str] = None
    membership_discount: Decimal = ZERO
    merchandise_total: Decimal = ZERO
    grand_total: Decimal = ZERO

    def as_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "item_count": self.item_count,
            "shipping_fee": str(self.shipping_fee),
            "coupon_code": self.coupon_code or None,
            "coupon_discount": str(self.coupon_discount),
            "free_delivery": self.free_delivery,
            "coupon_error": self.coupon_error,
            "membership_tier": self.membership_tier,
            "membership_discount": str(self.membership_discount),
            "merchandise_total": str(self.merchandise_total),
            "grand_total": str(self.grand_total),
        }


def line_total(unit_price, quantity) -> Decimal:
    return _money(_money(unit_price) * int(quantity))


def subtotal_of(lines: Iterable[tuple]) -> Decimal:
    """
    lines: iterable of (unit_price, quantity)
    """
    return _money(sum((line_total(price, qty) for price, qty in lines), ZERO))


def item_count_of(lines: Iterable[tuple]) -> int:
    return sum(int(qty) for _, qty in lines)


def shipping_fee_for(subtotal, *, item_count: int, free_delivery: bool = False, rules: ShippingRules | None = None) -> Decimal:
    rules = rules or ShippingRules.from_settings()
    subtotal = _money(subtotal)

    if item_count <= 0:
        return ZERO
    if free_delivery:
        return ZERO
    if subtotal >= rules.free_threshold:
        return ZERO
    return rules.base_fee


def clamp_coupon_discount(discount, subtotal) -> Decimal:
    discount = _money(discount)
    subtotal = _money(subtotal)
    if discount < ZERO:
        return ZERO
    return min(discount, subtotal)


def membership_discount_for(subtotal, rate) -> Decimal:
    return (_money(subtotal) * Decimal(str(rate or "0"))).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_totals(
    *,
    lines: list[tuple],
    coupon_code: str = "",
    coupon_discount=ZERO,
    free_delivery: bool = False,
    coupon_error: Optional[dict] = None,
    membership_tier: Optional[str] = None,
    membership_rate=ZERO,
    rules: ShippingRules | None = None,
) -> Totals:
    subtotal = subtotal_of(lines)
    item_count = item_count_of(lines)

    coupon_value = ZERO if free_delivery else clamp_coupon_discount(coupon_discount, subtotal)
    member_value = membership_discount_for(subtotal, membership_rate)

    merchandise = subtotal - member_value - coupon_value
    if merchandise < ZERO:
        merchandise = ZERO
    merchandise = _money(merchandise)

    shipping = shipping_fee_for(subtotal, item_count=item_count, free_delivery=free_delivery, rules=rules)

    return Totals(
        subtotal=subtotal,
        item_count=item_count,
        shipping_fee=shipping,
        coupon_code=coupon_code or "",
        coupon_discount=coupon_value,
        free_delivery=bool(free_delivery),
        coupon_error=coupon_error,
        membership_tier=membership_tier,
        membership_discount=member_value,
        merchandise_total=merchandise,
        grand_total=_money(merchandise + shipping),
    )
