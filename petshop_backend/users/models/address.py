# users/models/address.py

"""
SHIPPING ADDRESS BOOK

Rules:
- A user owns many addresses.
- At most ONE default address per user (enforced by a partial unique constraint).
- Default switching is handled in users.services.addresses (atomic).
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class Address(models.Model):
    LABEL_HOME = "home"
    LABEL_WORK = "work"
    LABEL_OTHER = "other"

    LABEL_CHOICES = [
        (LABEL_HOME, "Home"),
        (LABEL_WORK, "Work"),
        (LABEL_OTHER, "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    label = models.CharField(max_length=16, choices=LABEL_CHOICES, default=LABEL_HOME)

    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=40)
    line1 = models.CharField(max_length=255)
    line2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=120)
    region = models.CharField(max_length=120, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=80, default="Bangladesh")

    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(is_default=True),
                name="uniq_default_address_per_user",
            ),
        ]

    def as_shipping_text(self) -> str:
        parts = [
            self.line1,
            self.line2,
            self.city,
            self.region,
            self.postal_code,
            self.country,
        ]
        return ", ".join(p for p in parts if p)

    def __str__(self):
        return f"{self.full_name} - {self.city} ({self.label})"
