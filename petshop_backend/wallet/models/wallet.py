# wallet/models/wallet.py

"""
WALLET + WALLET LEDGER

Wallet:
- One per user, created lazily on first use
- balance / frozen_balance / total_earned / total_spent never negative

WalletTransaction (immutable):
- Every balance mutation writes exactly one row
- balance_before / balance_after describe the spendable balance
- EARN / REFUND credit, SPEND debits, FREEZE / UNFREEZE move between
  balance and frozen_balance
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Wallet(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet",
    )

    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    frozen_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_earned = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_spent = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def clean(self):
        for field in ("balance", "frozen_balance", "total_earned", "total_spent"):
            if getattr(self, field) < 0:
                raise ValidationError({field: f"{field} cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"Wallet({self.user_id}) {self.balance}"


class WalletTransaction(models.Model):
    class Type(models.TextChoices):
        EARN = "EARN", "Earn"
        SPEND = "SPEND", "Spend"
        REFUND = "REFUND", "Refund"
        FREEZE = "FREEZE", "Freeze"
        UNFREEZE = "UNFREEZE", "Unfreeze"

    # Fixed sources; rewards add TASK_<type> and GAME_<type>.
    SOURCE_DAILY_CHECKIN = "DAILY_CHECKIN"
    SOURCE_ORDER_PAYMENT = "ORDER_PAYMENT"
    SOURCE_ORDER_REFUND = "ORDER_REFUND"
    SOURCE_MEMBERSHIP_PURCHASE = "MEMBERSHIP_PURCHASE"
    SOURCE_MEMBERSHIP_RENEWAL = "MEMBERSHIP_RENEWAL"
    SOURCE_FREE_DELIVERY_COUPON = "FREE_DELIVERY_COUPON"
    SOURCE_STAFF_ADJUSTMENT = "STAFF_ADJUSTMENT"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    wallet = models.ForeignKey(Wallet, on_delete=models.CASCADE, related_name="transactions")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet_transactions",
    )

    type = models.CharField(max_length=10, choices=Type.choices)
    source = models.CharField(max_length=50)
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    balance_before = models.DecimalField(max_digits=12, decimal_places=2)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)

    description = models.CharField(max_length=255, blank=True, default="")
    metadata = models.JSONField(default=dict, blank=True)
    reference = models.CharField(max_length=64, blank=True, default="", db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="wallet_txn_user_crt_idx"),
            models.Index(fields=["type", "source"], name="wallet_txn_type_src_idx"),
        ]

    def clean(self):
        if self.amount is None or self.amount <= 0:
            raise ValidationError({"amount": "amount must be greater than zero"})

        if self.balance_after < 0:
            raise ValidationError({"balance_after": "balance cannot go negative"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("WalletTransaction records are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("WalletTransaction records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.type} {self.amount} ({self.source})"
