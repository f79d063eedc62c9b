# promotions/models/coupon.py

"""
COUPON

Rules:
- code is stored upper-case and unique (matched case-insensitively)
- percentage: value is a percent (0-100), optional max discount cap
- fixed: value is a currency amount
- free_delivery: waives shipping, value ignored
- usage_limit (when set) is >= 1; used_count only moves through
  promotions.services.coupons.redeem_coupon (conditional update)
- issued_to (optional) restricts the coupon to one customer
  (e.g. free-delivery coupons bought with wallet balance)
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Coupon(models.Model):
    TYPE_PERCENTAGE = "percentage"
    TYPE_FIXED = "fixed"
    TYPE_FREE_DELIVERY = "free_delivery"

    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, "Percentage"),
        (TYPE_FIXED, "Fixed amount"),
        (TYPE_FREE_DELIVERY, "Free delivery"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=40, unique=True)
    description = models.CharField(max_length=255, blank=True, default="")

    discount_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    discount_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    min_order_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    max_discount_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)

    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()

    is_active = models.BooleanField(default=True)

    issued_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="personal_coupons",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        self.code = (self.code or "").strip().upper()
        if not self.code:
            raise ValidationError({"code": "code is required"})

        if self.discount_value is None or self.discount_value < 0:
            raise ValidationError({"discount_value": "discount_value must be >= 0"})

        if self.discount_type == self.TYPE_PERCENTAGE and self.discount_value > 100:
            raise ValidationError({"discount_value": "percentage cannot exceed 100"})

        if self.usage_limit is not None and self.usage_limit < 1:
            raise ValidationError({"usage_limit": "usage_limit must be at least 1"})

        if self.min_order_amount is not None and self.min_order_amount < 0:
            raise ValidationError({"min_order_amount": "min_order_amount must be >= 0"})

        if self.max_discount_amount is not None and self.max_discount_amount < 0:
            raise ValidationError({"max_discount_amount": "max_discount_amount must be >= 0"})

        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValidationError({"valid_until": "valid_until must be after valid_from"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def is_free_delivery(self) -> bool:
        return self.discount_type == self.TYPE_FREE_DELIVERY

    def __str__(self):
        return f"{self.code} ({self.discount_type})"
