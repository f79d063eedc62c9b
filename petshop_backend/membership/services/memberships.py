# membership/services/memberships.py

"""
======================================================
PATH: membership/services/memberships.py
======================================================
MEMBERSHIP SERVICES

Read helpers (used by cart pricing, checkout and wallet rewards):
- get_active_membership / active_tier
- discount_rate / reward_multiplier / checkin_bonus / wallet_usage_rate

Writes:
- purchase_membership: wallet-paid (MEMBERSHIP_PURCHASE)
- grant_membership: staff, no charge
- set_auto_renew
- record_order_savings: checkout statistics

Period rules:
- same tier while active -> extend one period from the current expiry
- otherwise -> new tier starts now for one period
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from membership.models import Membership
from membership.tiers import (
    BASE_CHECKIN_BONUS,
    BASE_DISCOUNT_RATE,
    BASE_REWARD_MULTIPLIER,
    BASE_WALLET_USAGE_RATE,
    Tier,
    get_tier,
)
from wallet.models import WalletTransaction
from wallet.services import ledger

logger = logging.getLogger("membership")

TWOPLACES = Decimal("0.01")


# ---------------------------------------------------------
# Errors
# ---------------------------------------------------------
class MembershipError(Exception):
    code = "MEMBERSHIP_ERROR"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownTierError(MembershipError):
    code = "MEMBERSHIP_TIER_INVALID"


class MembershipNotFoundError(MembershipError):
    code = "MEMBERSHIP_NOT_FOUND"
    http_status = 404


# ---------------------------------------------------------
# Reads
# ---------------------------------------------------------
def period() -> timedelta:
    return timedelta(days=int(settings.MEMBERSHIP_PERIOD_DAYS))


def get_active_membership(user, *, now=None) -> Optional[Membership]:
    if not user or not getattr(user, "is_authenticated", False):
        return None
    now = now or timezone.now()
    return Membership.objects.filter(user=user, expiry_date__gt=now).first()


def active_tier(user, *, now=None) -> Optional[Tier]:
    membership = get_active_membership(user, now=now)
    return membership.tier_info if membership else None


def discount_rate(user) -> Decimal:
    tier = active_tier(user)
    return tier.discount_rate if tier else BASE_DISCOUNT_RATE


def reward_multiplier(user) -> Decimal:
    tier = active_tier(user)
    return tier.reward_multiplier if tier else BASE_REWARD_MULTIPLIER


def checkin_bonus(user) -> Decimal:
    tier = active_tier(user)
    return tier.checkin_bonus if tier else BASE_CHECKIN_BONUS


def wallet_usage_rate(user) -> Decimal:
    tier = active_tier(user)
    return tier.wallet_usage_rate if tier else BASE_WALLET_USAGE_RATE


def membership_discount(user, subtotal) -> Decimal:
    rate = discount_rate(user)
    return (Decimal(subtotal) * rate).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------
# Writes
# ---------------------------------------------------------
def _require_tier(tier_key) -> Tier:
    tier = get_tier(tier_key)
    if tier is None:
        raise UnknownTierError(f"Unknown membership tier: {tier_key}")
    return tier


def _apply_period(*, user, tier: Tier, now) -> Membership:
    membership = Membership.objects.select_for_update().filter(user=user).first()

    if membership is None:
        return Membership.objects.create(
            user=user,
            tier=tier.key,
            start_date=now,
            expiry_date=now + period(),
            last_renew_date=now,
        )

    if membership.tier == tier.key and membership.is_active_at(now):
        membership.expiry_date = membership.expiry_date + period()
    else:
        membership.tier = tier.key
        membership.start_date = now
        membership.expiry_date = now + period()

    membership.last_renew_date = now
    membership.save()
    return membership


@transaction.atomic
def purchase_membership(*, user, tier_key) -> Membership:
    """
    Charge the tier price from the wallet and start/extend the membership.
    InsufficientWalletBalanceError propagates unchanged.
    """
    tier = _require_tier(tier_key)
    now = timezone.now()

    ledger.spend(
        user=user,
        amount=tier.price,
        source=WalletTransaction.SOURCE_MEMBERSHIP_PURCHASE,
        description=f"{tier.name} membership",
        metadata={"tier": tier.key},
    )
    membership = _apply_period(user=user, tier=tier, now=now)

    logger.info(
        "Membership purchased",
        extra={"user_id": str(user.pk), "tier": tier.key, "expiry_date": membership.expiry_date.isoformat()},
    )
    return membership


@transaction.atomic
def grant_membership(*, user, tier_key, granted_by=None) -> Membership:
    tier = _require_tier(tier_key)
    membership = _apply_period(user=user, tier=tier, now=timezone.now())

    logger.info(
        "Membership granted",
        extra={
            "user_id": str(user.pk),
            "tier": tier.key,
            "granted_by": str(getattr(granted_by, "pk", "") or ""),
        },
    )
    return membership


@transaction.atomic
def renew_membership(*, membership: Membership) -> Membership:
    """
    Auto-renew: charge the tier price and extend one period from expiry
    (even when the membership lapsed a few hours ago).
    """
    membership = Membership.objects.select_for_update().get(pk=membership.pk)
    tier = _require_tier(membership.tier)

    ledger.spend(
        user=membership.user,
        amount=tier.price,
        source=WalletTransaction.SOURCE_MEMBERSHIP_RENEWAL,
        description=f"{tier.name} membership auto-renewal",
        metadata={"tier": tier.key},
    )

    now = timezone.now()
    membership.expiry_date = membership.expiry_date + period()
    membership.last_renew_date = now
    membership.save()
    return membership


def set_auto_renew(*, user, enabled: bool) -> Membership:
    membership = Membership.objects.filter(user=user).first()
    if membership is None:
        raise MembershipNotFoundError("No membership found")

    membership.auto_renew = bool(enabled)
    membership.save(update_fields=["auto_renew", "updated_at"])
    return membership


def record_order_savings(*, user, saved, exclusive_units: int = 0) -> None:
    """
    Called inside the checkout transaction for active members.
    """
    Membership.objects.filter(user=user).update(
        total_saved=F("total_saved") + Decimal(saved),
        exclusive_products_purchased=F("exclusive_products_purchased") + int(exclusive_units or 0),
        updated_at=timezone.now(),
    )
