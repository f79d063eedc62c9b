# catalog/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from catalog.services.slugs import unique_slug

from .category import Brand, Category


class Product(models.Model):
    """
    Represents a sellable pet-supply product.

    STOCK MODEL:
    - stock_quantity is the single on-hand number
    - it only moves through catalog.services.inventory (which writes StockMovement)
    - stock_status is derived, never stored

    PRICING:
    - price is the current selling price (server side source of truth)
    - original_price + discount_percent are display data for "on sale" badges
    """

    STOCK_IN = "in_stock"
    STOCK_LOW = "low_stock"
    STOCK_OUT = "out_of_stock"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(max_digits=12, decimal_places=2)
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    discount_percent = models.PositiveSmallIntegerField(default=0)

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    brand = models.ForeignKey(
        Brand,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    subcategory = models.CharField(max_length=120, blank=True, default="", db_index=True)

    image = models.CharField(max_length=500, blank=True, default="")
    images = models.JSONField(default=list, blank=True)

    rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    review_count = models.PositiveIntegerField(default=0)

    stock_quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=10)

    tags = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)

    is_new = models.BooleanField(default=False)
    is_bestseller = models.BooleanField(default=False)
    is_on_sale = models.BooleanField(default=False)
    is_member_exclusive = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "category"], name="catalog_pro_is_acti_cat_idx"),
            models.Index(fields=["is_active", "brand"], name="catalog_pro_is_acti_brd_idx"),
            models.Index(fields=["price"], name="catalog_pro_price_idx"),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "name cannot be blank"})

        if self.price is None or self.price < 0:
            raise ValidationError({"price": "price must be non-negative"})

        if self.original_price is not None and self.original_price < 0:
            raise ValidationError({"original_price": "original_price must be non-negative"})

        if self.discount_percent > 100:
            raise ValidationError({"discount_percent": "discount_percent must be between 0 and 100"})

        if self.rating < 0 or self.rating > 5:
            raise ValidationError({"rating": "rating must be between 0 and 5"})

        if not isinstance(self.images, list):
            raise ValidationError({"images": "images must be a list"})
        if not isinstance(self.tags, list):
            raise ValidationError({"tags": "tags must be a list"})
        if not isinstance(self.features, list):
            raise ValidationError({"features": "features must be a list"})
        if not isinstance(self.specifications, dict):
            raise ValidationError({"specifications": "specifications must be an object"})

        self.tags = [str(t).strip().lower() for t in self.tags if str(t).strip()]

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Product, self.name, instance=self, max_length=255)
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def stock_status(self) -> str:
        qty = int(self.stock_quantity or 0)
        if qty <= 0:
            return self.STOCK_OUT
        if qty <= int(self.low_stock_threshold or 0):
            return self.STOCK_LOW
        return self.STOCK_IN

    @property
    def in_stock(self) -> bool:
        return int(self.stock_quantity or 0) > 0

    def __str__(self):
        return f"{self.name} ({self.slug})"
