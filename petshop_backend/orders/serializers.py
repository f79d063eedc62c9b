# orders/serializers.py

from rest_framework import serializers

from orders.models import Invoice, Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "product_image",
            "unit_price",
            "quantity",
            "line_total",
            "is_member_exclusive",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Canonical order payload (customer + staff).
    """

    items = OrderItemSerializer(many=True, read_only=True)
    invoice_number = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "invoice_number",
            "status",
            "payment_method",
            "payment_status",
            "subtotal",
            "membership_discount",
            "coupon_discount",
            "shipping_fee",
            "merchandise_total",
            "grand_total",
            "wallet_amount_used",
            "amount_due",
            "coupon_code",
            "membership_tier",
            "customer_name",
            "customer_email",
            "customer_phone",
            "shipping_address",
            "notes",
            "cancel_reason",
            "items",
            "created_at",
            "shipped_at",
            "delivered_at",
            "cancelled_at",
        ]
        read_only_fields = fields

    def get_invoice_number(self, obj):
        invoice = getattr(obj, "invoice", None)
        return getattr(invoice, "invoice_number", None)


class OrderTrackingSerializer(serializers.ModelSerializer):
    """
    Public tracking view: no contact details, no address.
    """

    items = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "order_number",
            "status",
            "payment_status",
            "grand_total",
            "items",
            "created_at",
            "shipped_at",
            "delivered_at",
            "cancelled_at",
        ]
        read_only_fields = fields

    def get_items(self, obj):
        return [{"product_name": i.product_name, "quantity": i.quantity} for i in obj.items.all()]


class InvoiceSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)
    payment_status = serializers.CharField(source="order.payment_status", read_only=True)
    items = OrderItemSerializer(source="order.items", many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "order_number",
            "order_status",
            "payment_method",
            "payment_status",
            "currency",
            "customer_name",
            "customer_email",
            "customer_phone",
            "shipping_address",
            "subtotal",
            "membership_discount",
            "coupon_discount",
            "shipping_fee",
            "grand_total",
            "wallet_amount_used",
            "amount_due",
            "items",
            "issued_at",
        ]
        read_only_fields = fields


# -----------------------------
# Input serializers
# -----------------------------


class CheckoutInputSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=[c[0] for c in Order.PAYMENT_METHOD_CHOICES], default=Order.PAYMENT_COD)
    wallet_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    address_id = serializers.UUIDField(required=False, allow_null=True)

    customer_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    customer_email = serializers.EmailField(required=False, allow_blank=True)
    customer_phone = serializers.CharField(required=False, allow_blank=True, max_length=40)
    shipping_address = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Order.STATUS_CHOICES])
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class OrderTrackingQuerySerializer(serializers.Serializer):
    order_number = serializers.CharField(max_length=64)
    email = serializers.EmailField()
