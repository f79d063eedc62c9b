# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL

ZERO = Decimal("0.00")


def new_order_number() -> str:
    prefix = timezone.now().strftime("ORD%Y%m%d")
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class Order(models.Model):
    """
    A placed storefront order.

    GUARANTEES:
    - Money fields are server computed at checkout and never edited afterwards
    - Status moves only through orders.services.order_lifecycle
    - Stock was decremented (SALE movements) when the order was written
    """

    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_COD = "cod"
    PAYMENT_WALLET = "wallet"
    PAYMENT_ONLINE = "online"

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_COD, "Cash on delivery"),
        (PAYMENT_WALLET, "Wallet"),
        (PAYMENT_ONLINE, "Online"),
    ]

    PAYMENT_PENDING = "pending"
    PAYMENT_PAID = "paid"
    PAYMENT_REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    _IMMUTABLE_FIELDS = (
        "order_number",
        "user_id",
        "subtotal",
        "membership_discount",
        "coupon_discount",
        "shipping_fee",
        "merchandise_total",
        "grand_total",
        "wallet_amount_used",
        "payment_method",
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(max_length=64, unique=True, blank=True)

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name="orders",
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PROCESSING)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default=PAYMENT_COD)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    membership_discount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    coupon_discount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    shipping_fee = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    merchandise_total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    wallet_amount_used = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    amount_due = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=ZERO,
        help_text="grand_total - wallet_amount_used (collected on delivery / online)",
    )

    coupon_code = models.CharField(max_length=40, blank=True, default="")
    membership_tier = models.CharField(max_length=20, blank=True, default="")

    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=40, blank=True, default="")
    shipping_address = models.TextField()
    notes = models.CharField(max_length=500, blank=True, default="")

    cancel_reason = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]

    def clean(self):
        for field in ("subtotal", "shipping_fee", "grand_total", "wallet_amount_used", "amount_due"):
            if getattr(self, field) is not None and Decimal(getattr(self, field)) < ZERO:
                raise ValidationError({field: "Must not be negative."})
        if self.wallet_amount_used is not None and self.grand_total is not None:
            if Decimal(self.wallet_amount_used) > Decimal(self.grand_total):
                raise ValidationError({"wallet_amount_used": "Cannot exceed the grand total."})

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None:
                for field in self._IMMUTABLE_FIELDS:
                    if getattr(self, field) != getattr(previous, field):
                        raise ValidationError(f"Order field '{field}' cannot be changed after checkout.")

        if not self.order_number:
            self.order_number = new_order_number()

        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} | {self.grand_total} | {self.status}"


class OrderItem(models.Model):
    """
    Order line with a snapshot of the product at checkout time.
    product is kept nullable so catalog deletions never break history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )

    product_name = models.CharField(max_length=255)
    product_image = models.CharField(max_length=500, blank=True, default="")
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(ZERO)])
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    line_total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    is_member_exclusive = models.BooleanField(default=False)

    class Meta:
        ordering = ["product_name"]
        indexes = [
            models.Index(fields=["product"], name="order_item_product_idx"),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError("quantity must be >= 1")
        self.line_total = (Decimal(self.unit_price) * int(self.quantity)).quantize(Decimal("0.01"))

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
