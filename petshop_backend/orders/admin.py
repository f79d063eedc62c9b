from django.contrib import admin

from orders.models import Invoice, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = [
        "product",
        "product_name",
        "unit_price",
        "quantity",
        "line_total",
        "is_member_exclusive",
    ]
    fields = readonly_fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "user", "status", "payment_method", "payment_status", "grand_total", "created_at")
    list_filter = ("status", "payment_method", "payment_status")
    search_fields = ("order_number", "customer_email", "customer_name")
    readonly_fields = (
        "order_number",
        "user",
        "subtotal",
        "membership_discount",
        "coupon_discount",
        "shipping_fee",
        "merchandise_total",
        "grand_total",
        "wallet_amount_used",
        "amount_due",
        "payment_method",
        "coupon_code",
        "created_at",
    )
    inlines = [OrderItemInline]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "order", "customer_email", "grand_total", "issued_at")
    search_fields = ("invoice_number", "customer_email")

    def has_change_permission(self, request, obj=None):
        return False
