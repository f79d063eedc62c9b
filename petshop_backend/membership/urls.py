# membership/urls.py

from django.urls import path

from membership.views import (
    AutoRenewView,
    MembershipGrantView,
    MembershipPurchaseView,
    MyMembershipView,
    TierListView,
)

app_name = "membership"

urlpatterns = [
    path("tiers/", TierListView.as_view(), name="tiers"),
    path("me/", MyMembershipView.as_view(), name="me"),
    path("purchase/", MembershipPurchaseView.as_view(), name="purchase"),
    path("auto-renew/", AutoRenewView.as_view(), name="auto-renew"),
    path("manage/grant/", MembershipGrantView.as_view(), name="grant"),
]
