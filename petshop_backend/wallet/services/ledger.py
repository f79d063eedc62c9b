# wallet/services/ledger.py

"""
======================================================
PATH: wallet/services/ledger.py
======================================================
WALLET LEDGER (the only writer of Wallet balances)

Rules:
- amount must be > 0 (2dp, half-up)
- EARN / REFUND: balance += amount, total_earned += amount
- SPEND: balance -= amount (rejected when balance < amount), total_spent += amount
- FREEZE: balance -> frozen_balance
- UNFREEZE: frozen_balance -> balance
- each call locks the wallet row and writes one WalletTransaction

Daily earning allowance:
- MAX_DAILY_EARNING minus today's reward EARN rows
  (staff adjustments do not count against it)
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from wallet.models import Wallet, WalletTransaction
from wallet.services.exceptions import InsufficientWalletBalanceError, InvalidAmountError

logger = logging.getLogger("wallet")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _positive(amount) -> Decimal:
    try:
        value = _money(amount)
    except ArithmeticError:
        raise InvalidAmountError("amount must be a number")
    if value <= ZERO:
        raise InvalidAmountError("amount must be greater than zero")
    return value


def max_daily_earning() -> Decimal:
    return _money(settings.WALLET_LIMITS["MAX_DAILY_EARNING"])


def start_of_day(now=None):
    now = timezone.localtime(now or timezone.now())
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def get_or_create_wallet(user) -> Wallet:
    wallet, _ = Wallet.objects.get_or_create(user=user)
    return wallet


def lock_wallet(user) -> Wallet:
    """
    Lock (and lazily create) the user's wallet row.
    Reward services call this first to serialize per-user rule checks.
    """
    wallet = get_or_create_wallet(user)
    return Wallet.objects.select_for_update().get(pk=wallet.pk)


def _record(
    *,
    wallet: Wallet,
    txn_type: str,
    source: str,
    amount: Decimal,
    before: Decimal,
    description: str = "",
    metadata=None,
    reference: str = "",
) -> WalletTransaction:
    txn = WalletTransaction.objects.create(
        wallet=wallet,
        user_id=wallet.user_id,
        type=txn_type,
        source=source,
        amount=amount,
        balance_before=before,
        balance_after=wallet.balance,
        description=(description or "")[:255],
        metadata=metadata or {},
        reference=(reference or "")[:64],
    )
    logger.info(
        "Wallet transaction recorded",
        extra={
            "user_id": str(wallet.user_id),
            "type": txn_type,
            "source": source,
            "amount": str(amount),
            "balance_after": str(wallet.balance),
            "reference": reference,
        },
    )
    return txn


@transaction.atomic
def earn(*, user, amount, source: str, description: str = "", metadata=None, reference: str = "") -> WalletTransaction:
    value = _positive(amount)
    wallet = lock_wallet(user)
    before = wallet.balance

    wallet.balance = before + value
    wallet.total_earned = wallet.total_earned + value
    wallet.save(update_fields=["balance", "total_earned", "updated_at"])

    return _record(
        wallet=wallet,
        txn_type=WalletTransaction.Type.EARN,
        source=source,
        amount=value,
        before=before,
        description=description,
        metadata=metadata,
        reference=reference,
    )


@transaction.atomic
def refund(*, user, amount, source: str, description: str = "", metadata=None, reference: str = "") -> WalletTransaction:
    value = _positive(amount)
    wallet = lock_wallet(user)
    before = wallet.balance

    wallet.balance = before + value
    wallet.total_earned = wallet.total_earned + value
    wallet.save(update_fields=["balance", "total_earned", "updated_at"])

    return _record(
        wallet=wallet,
        txn_type=WalletTransaction.Type.REFUND,
        source=source,
        amount=value,
        before=before,
        description=description,
        metadata=metadata,
        reference=reference,
    )


@transaction.atomic
def spend(*, user, amount, source: str, description: str = "", metadata=None, reference: str = "") -> WalletTransaction:
    value = _positive(amount)
    wallet = lock_wallet(user)
    before = wallet.balance

    if before < value:
        logger.warning(
            "Wallet spend rejected: insufficient balance",
            extra={"user_id": str(wallet.user_id), "amount": str(value), "balance": str(before), "source": source},
        )
        raise InsufficientWalletBalanceError(
            "Insufficient wallet balance",
            balance=str(before),
            required=str(value),
        )

    wallet.balance = before - value
    wallet.total_spent = wallet.total_spent + value
    wallet.save(update_fields=["balance", "total_spent", "updated_at"])

    return _record(
        wallet=wallet,
        txn_type=WalletTransaction.Type.SPEND,
        source=source,
        amount=value,
        before=before,
        description=description,
        metadata=metadata,
        reference=reference,
    )


@transaction.atomic
def freeze(*, user, amount, source: str = "FREEZE", description: str = "", reference: str = "") -> WalletTransaction:
    value = _positive(amount)
    wallet = lock_wallet(user)
    before = wallet.balance

    if before < value:
        raise InsufficientWalletBalanceError("Insufficient wallet balance to freeze")

    wallet.balance = before - value
    wallet.frozen_balance = wallet.frozen_balance + value
    wallet.save(update_fields=["balance", "frozen_balance", "updated_at"])

    return _record(
        wallet=wallet,
        txn_type=WalletTransaction.Type.FREEZE,
        source=source,
        amount=value,
        before=before,
        description=description,
        reference=reference,
    )


@transaction.atomic
def unfreeze(*, user, amount, source: str = "UNFREEZE", description: str = "", reference: str = "") -> WalletTransaction:
    value = _positive(amount)
    wallet = lock_wallet(user)
    before = wallet.balance

    if wallet.frozen_balance < value:
        raise InsufficientWalletBalanceError("Insufficient frozen balance")

    wallet.balance = before + value
    wallet.frozen_balance = wallet.frozen_balance - value
    wallet.save(update_fields=["balance", "frozen_balance", "updated_at"])

    return _record(
        wallet=wallet,
        txn_type=WalletTransaction.Type.UNFREEZE,
        source=source,
        amount=value,
        before=before,
        description=description,
        reference=reference,
    )


# ---------------------------------------------------------
# Daily earning allowance
# ---------------------------------------------------------
def earned_today(user, *, now=None) -> Decimal:
    since = start_of_day(now)
    total = (
        WalletTransaction.objects.filter(
            user=user,
            type=WalletTransaction.Type.EARN,
            created_at__gte=since,
            created_at__lt=since + timedelta(days=1),
        )
        .exclude(source=WalletTransaction.SOURCE_STAFF_ADJUSTMENT)
        .aggregate(total=Sum("amount"))
        .get("total")
    )
    return _money(total)


def daily_remaining(user, *, now=None) -> Decimal:
    remaining = max_daily_earning() - earned_today(user, now=now)
    return remaining if remaining > ZERO else ZERO
