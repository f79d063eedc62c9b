# catalog/admin.py

from django.contrib import admin

from catalog.models import Brand, Category, Product, ProductEvent, StockMovement


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "parent", "sort_order", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "slug")


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active")
    search_fields = ("name", "slug")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "stock_quantity", "category", "brand", "is_member_exclusive", "is_active")
    list_filter = ("is_active", "is_bestseller", "is_on_sale", "is_new", "is_member_exclusive", "category")
    search_fields = ("name", "slug", "subcategory")
    readonly_fields = ("stock_quantity",)


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("product", "reason", "quantity_change", "stock_after", "reference", "created_at")
    list_filter = ("reason",)
    search_fields = ("reference", "product__name")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ProductEvent)
class ProductEventAdmin(admin.ModelAdmin):
    list_display = ("product", "event_type", "user", "session_id", "created_at")
    list_filter = ("event_type",)
