# catalog/models/stock_movement.py

"""
INVENTORY LEDGER

Immutable stock audit entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity_change is signed: SALE < 0, RESTORE > 0, ADJUSTMENT either way
- stock_after == stock_before + quantity_change, and never negative
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .product import Product


class StockMovement(models.Model):
    class Reason(models.TextChoices):
        SALE = "SALE", "Sale"
        RESTORE = "RESTORE", "Order Cancelled (restock)"
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="stock_movements"
    )

    reason = models.CharField(max_length=20, choices=Reason.choices)
    quantity_change = models.IntegerField()
    stock_before = models.PositiveIntegerField()
    stock_after = models.PositiveIntegerField()

    # Order number for SALE / RESTORE rows.
    reference = models.CharField(max_length=64, blank=True, default="", db_index=True)
    note = models.CharField(max_length=255, blank=True, default="")

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="catalog_sto_product_crt_idx"),
            models.Index(fields=["reason"], name="catalog_sto_reason_idx"),
        ]

    def clean(self):
        if not self.quantity_change:
            raise ValidationError("quantity_change must be non-zero")

        if self.reason == self.Reason.SALE and self.quantity_change > 0:
            raise ValidationError("SALE movements must decrease stock")

        if self.reason == self.Reason.RESTORE and self.quantity_change < 0:
            raise ValidationError("RESTORE movements must increase stock")

        if self.stock_before + self.quantity_change != self.stock_after:
            raise ValidationError("stock_after does not match stock_before + quantity_change")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockMovement records are immutable and cannot be deleted")

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | {self.reason} | {self.quantity_change:+d}"
