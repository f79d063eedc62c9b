# promotions/services/coupons.py

"""
======================================================
PATH: promotions/services/coupons.py
======================================================
COUPON RULES

Validation order (first failure wins):
1) exists + active (+ owned by the shopper for personal coupons)
2) inside [valid_from, valid_until]
3) usage limit not reached
4) order subtotal >= min_order_amount

Discount:
- percentage: round half-up to whole currency units, then capped by max_discount_amount
- fixed: discount_value
- free_delivery: 0 (shipping is waived by the pricing layer)

Redemption:
- used_count is incremented with a conditional UPDATE so two shoppers can
  never both take the last use of a limited coupon.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import F, Q
from django.utils import timezone

from promotions.models import Coupon

logger = logging.getLogger("promotions")

TWOPLACES = Decimal("0.01")
WHOLE = Decimal("1")


# ---------------------------------------------------------
# Errors
# ---------------------------------------------------------
class CouponError(Exception):
    code = "COUPON_INVALID"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CouponNotFoundError(CouponError):
    code = "COUPON_INVALID"


class CouponExpiredError(CouponError):
    code = "COUPON_EXPIRED"


class CouponUsageLimitError(CouponError):
    code = "COUPON_USAGE_LIMIT_REACHED"


class CouponMinimumOrderError(CouponError):
    code = "COUPON_MIN_ORDER_NOT_MET"


class CouponRedemptionConflict(CouponError):
    code = "COUPON_USAGE_CONFLICT"
    http_status = 409


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def normalize_code(code) -> str:
    return (code or "").strip().upper()


def find_coupon(code, *, for_update: bool = False):
    qs = Coupon.objects.all()
    if for_update:
        qs = qs.select_for_update()
    return qs.filter(code=normalize_code(code)).first()


# ---------------------------------------------------------
# Validation + calculation
# ---------------------------------------------------------
def check_coupon(coupon, *, subtotal, user=None, now=None) -> Coupon:
    """
    Apply the validation chain to an already-loaded coupon.
    """
    now = now or timezone.now()
    subtotal = _money(subtotal)

    if coupon is None or not coupon.is_active:
        raise CouponNotFoundError("Invalid coupon code")

    if coupon.issued_to_id is not None:
        user_id = getattr(user, "pk", None) if getattr(user, "is_authenticated", False) else None
        if user_id != coupon.issued_to_id:
            raise CouponNotFoundError("Invalid coupon code")

    if now < coupon.valid_from or now > coupon.valid_until:
        raise CouponExpiredError("Coupon has expired or is not yet valid")

    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        raise CouponUsageLimitError("Coupon usage limit reached")

    if coupon.min_order_amount is not None and subtotal < coupon.min_order_amount:
        raise CouponMinimumOrderError(
            f"Minimum order amount of {_money(coupon.min_order_amount)} required"
        )

    return coupon


def validate_coupon(code, *, subtotal, user=None, now=None) -> Coupon:
    return check_coupon(find_coupon(code), subtotal=subtotal, user=user, now=now)


def compute_discount(coupon: Coupon, subtotal) -> Decimal:
    subtotal = _money(subtotal)

    if coupon.discount_type == Coupon.TYPE_PERCENTAGE:
        raw = (subtotal * Decimal(coupon.discount_value) / Decimal("100")).quantize(WHOLE, rounding=ROUND_HALF_UP)
        discount = _money(raw)
        if coupon.max_discount_amount is not None:
            discount = min(discount, _money(coupon.max_discount_amount))
        return discount

    if coupon.discount_type == Coupon.TYPE_FIXED:
        return _money(coupon.discount_value)

    return Decimal("0.00")


def quote_coupon(code, *, subtotal, user=None) -> tuple[Coupon, Decimal]:
    coupon = validate_coupon(code, subtotal=subtotal, user=user)
    return coupon, compute_discount(coupon, subtotal)


# ---------------------------------------------------------
# Redemption (call inside the checkout transaction)
# ---------------------------------------------------------
def redeem_coupon(code, *, subtotal, user=None, reference: str = "") -> tuple[Coupon, Decimal]:
    """
    Re-validate and consume one use.

    Raises CouponRedemptionConflict when the last use was taken concurrently.
    Personal coupons (issued_to) are deactivated once used.
    """
    coupon = check_coupon(find_coupon(code, for_update=True), subtotal=subtotal, user=user)

    updated = (
        Coupon.objects.filter(pk=coupon.pk, is_active=True)
        .filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit")))
        .update(used_count=F("used_count") + 1, updated_at=timezone.now())
    )
    if updated != 1:
        logger.warning(
            "Coupon redemption conflict",
            extra={"coupon": coupon.code, "reference": reference},
        )
        raise CouponRedemptionConflict("Coupon usage limit reached")

    coupon.refresh_from_db()

    if coupon.issued_to_id is not None:
        Coupon.objects.filter(pk=coupon.pk).update(is_active=False)
        coupon.is_active = False

    discount = compute_discount(coupon, subtotal)
    logger.info(
        "Coupon redeemed",
        extra={
            "coupon": coupon.code,
            "used_count": coupon.used_count,
            "discount": str(discount),
            "reference": reference,
        },
    )
    return coupon, discount
