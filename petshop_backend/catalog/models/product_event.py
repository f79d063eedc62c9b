# catalog/models/product_event.py

import uuid

from django.conf import settings
from django.db import models

from .product import Product


class ProductEvent(models.Model):
    """
    Shopper behaviour signal used by recommendations.

    Identified by user when signed in, otherwise by the client session id
    (X-Session-Id header).
    """

    class EventType(models.TextChoices):
        VIEW = "view", "View"
        CLICK = "click", "Click"
        ADD_TO_CART = "add_to_cart", "Add to cart"
        PURCHASE = "purchase", "Purchase"
        WISHLIST = "wishlist", "Wishlist"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="events")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="product_events",
    )
    session_id = models.CharField(max_length=64, blank=True, default="", db_index=True)

    event_type = models.CharField(max_length=20, choices=EventType.choices)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event_type", "created_at"], name="catalog_pro_evt_type_crt_idx"),
            models.Index(fields=["user", "created_at"], name="catalog_pro_user_crt_idx"),
        ]

    def __str__(self):
        return f"{self.event_type} {self.product_id}"
