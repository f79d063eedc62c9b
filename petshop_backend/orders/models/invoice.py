# orders/models/invoice.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

ZERO = Decimal("0.00")


def new_invoice_number() -> str:
    prefix = timezone.now().strftime("INV-%Y%m%d")
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class Invoice(models.Model):
    """
    Customer-facing invoice written once at checkout.
    Totals are a copy of the order's at that moment.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_number = models.CharField(max_length=64, unique=True, blank=True)

    order = models.OneToOneField("orders.Order", on_delete=models.CASCADE, related_name="invoice")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="invoices",
    )

    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=40, blank=True, default="")
    shipping_address = models.TextField()

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    membership_discount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    coupon_discount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    shipping_fee = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    wallet_amount_used = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    amount_due = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)

    payment_method = models.CharField(max_length=20)
    currency = models.CharField(max_length=8, default="BDT")

    issued_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["user", "issued_at"], name="invoice_user_issued_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.invoice_number:
            self.invoice_number = new_invoice_number()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.invoice_number} | {self.grand_total}"
