# users/admin.py

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from users.models import Address

User = get_user_model()


class AddressInline(admin.TabularInline):
    model = Address
    extra = 0
    fields = ("label", "full_name", "phone", "line1", "city", "postal_code", "is_default")


@admin.register(User)
class ShopperAdmin(DjangoUserAdmin):
    """Shoppers and staff share one table; role decides what staff can do."""

    ordering = ("-created_at",)
    date_hierarchy = "created_at"
    list_display = ("email", "username", "full_name", "phone", "role", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("email", "username", "first_name", "last_name", "phone")
    readonly_fields = ("last_login", "created_at", "updated_at")
    inlines = [AddressInline]

    fieldsets = (
        ("Sign-in", {"fields": ("email", "username", "password")}),
        ("Shopper", {"fields": ("first_name", "last_name", "phone")}),
        ("Staff access", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Activity", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "username", "password1", "password2", "role"),
            },
        ),
    )

    @admin.display(description="Name")
    def full_name(self, obj):
        return obj.full_name
