# membership/admin.py

from django.contrib import admin

from membership.models import Membership


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ("user", "tier", "start_date", "expiry_date", "auto_renew", "total_saved")
    list_filter = ("tier", "auto_renew")
    search_fields = ("user__email", "user__username")
    readonly_fields = (
        "total_saved",
        "exclusive_products_purchased",
        "last_renew_date",
        "last_expiry_notice_for",
        "last_renewal_failure_for",
    )
