# membership/models/membership.py

"""
MEMBERSHIP

Rules:
- One row per user (kept after expiry for history + renewal)
- Active while expiry_date > now
- total_saved / exclusive_products_purchased are updated by checkout
- last_expiry_notice_for remembers which expiry_date was already announced
- last_renewal_failure_for does the same for the auto-renew-failed e-mail
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from membership.tiers import TIER_CHOICES, get_tier


class Membership(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="membership",
    )

    tier = models.CharField(max_length=20, choices=TIER_CHOICES)
    start_date = models.DateTimeField()
    expiry_date = models.DateTimeField()
    auto_renew = models.BooleanField(default=False)

    total_saved = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    exclusive_products_purchased = models.PositiveIntegerField(default=0)
    last_renew_date = models.DateTimeField(null=True, blank=True)
    last_expiry_notice_for = models.DateTimeField(null=True, blank=True)
    last_renewal_failure_for = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["expiry_date"], name="membership_expiry_idx"),
        ]

    def clean(self):
        if get_tier(self.tier) is None:
            raise ValidationError({"tier": "Unknown membership tier"})
        if self.start_date and self.expiry_date and self.expiry_date <= self.start_date:
            raise ValidationError({"expiry_date": "expiry_date must be after start_date"})
        if self.total_saved is not None and self.total_saved < 0:
            raise ValidationError({"total_saved": "total_saved cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def is_active_at(self, when) -> bool:
        return self.expiry_date > when

    @property
    def is_active(self) -> bool:
        return self.is_active_at(timezone.now())

    @property
    def tier_info(self):
        return get_tier(self.tier)

    def __str__(self):
        return f"{self.user_id} {self.tier} until {self.expiry_date:%Y-%m-%d}"
