# wallet/services/redemption.py

"""
WALLET REDEMPTIONS + STAFF ADJUSTMENTS

Free-delivery coupon:
- spends FREE_DELIVERY_REDEMPTION_COST (FREE_DELIVERY_COUPON)
- mints a personal, single-use free_delivery coupon valid for
  FREE_DELIVERY_VALID_DAYS

Staff adjustment:
- signed amount: credit (EARN) or debit (SPEND), source STAFF_ADJUSTMENT
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from promotions.models import Coupon
from wallet.models import WalletTransaction
from wallet.services import ledger
from wallet.services.exceptions import InvalidAmountError

logger = logging.getLogger("wallet")


def _new_coupon_code() -> str:
    while True:
        code = f"FREESHIP-{uuid.uuid4().hex[:8].upper()}"
        if not Coupon.objects.filter(code=code).exists():
            return code


@transaction.atomic
def redeem_free_delivery_coupon(*, user) -> Coupon:
    limits = settings.WALLET_LIMITS
    cost = Decimal(str(limits["FREE_DELIVERY_REDEMPTION_COST"]))
    valid_days = int(limits["FREE_DELIVERY_VALID_DAYS"])

    code = _new_coupon_code()
    ledger.spend(
        user=user,
        amount=cost,
        source=WalletTransaction.SOURCE_FREE_DELIVERY_COUPON,
        description="Free delivery coupon",
        metadata={"coupon_code": code},
        reference=code,
    )

    now = timezone.now()
    coupon = Coupon.objects.create(
        code=code,
        description="Free delivery (wallet redemption)",
        discount_type=Coupon.TYPE_FREE_DELIVERY,
        discount_value=Decimal("0.00"),
        usage_limit=1,
        valid_from=now,
        valid_until=now + timedelta(days=valid_days),
        issued_to=user,
    )

    logger.info("Free delivery coupon redeemed", extra={"user_id": str(user.pk), "coupon": code})
    return coupon


@transaction.atomic
def adjust_wallet(*, user, amount, note: str = "", performed_by=None) -> WalletTransaction:
    value = Decimal(str(amount))
    if value == 0:
        raise InvalidAmountError("amount must be non-zero")

    metadata = {"performed_by": str(getattr(performed_by, "pk", "") or "")}
    description = note or "Staff adjustment"

    if value > 0:
        return ledger.earn(
            user=user,
            amount=value,
            source=WalletTransaction.SOURCE_STAFF_ADJUSTMENT,
            description=description,
            metadata=metadata,
        )

    return ledger.spend(
        user=user,
        amount=-value,
        source=WalletTransaction.SOURCE_STAFF_ADJUSTMENT,
        description=description,
        metadata=metadata,
    )
