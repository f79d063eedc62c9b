# cart/models/cart.py

"""
SERVER-SIDE SHOPPING CART

Rules:
- One ACTIVE cart per user (checkout deactivates it)
- One line per product; unit_price is a snapshot refreshed on every add
- coupon_code is re-validated on every read and at checkout
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from catalog.models import Product


class Cart(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="carts",
    )
    is_active = models.BooleanField(default=True)
    coupon_code = models.CharField(max_length=40, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(is_active=True),
                name="uniq_active_cart_per_user",
            ),
        ]

    def __str__(self):
        return f"Cart({self.user_id}) {'active' if self.is_active else 'closed'}"


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_items")

    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    added_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["added_at"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "product"], name="uniq_cart_product"),
        ]

    def clean(self):
        if self.quantity is None or self.quantity < 1:
            raise ValidationError({"quantity": "quantity must be at least 1"})
        if self.unit_price is None or self.unit_price < 0:
            raise ValidationError({"unit_price": "unit_price cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price or Decimal("0.00")) * int(self.quantity or 0)

    def __str__(self):
        return f"{self.product_id} x {self.quantity}"
