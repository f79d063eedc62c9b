from .membership import (
    AutoRenewView,
    MembershipGrantView,
    MembershipPurchaseView,
    MyMembershipView,
    TierListView,
)

__all__ = [
    "AutoRenewView",
    "MembershipGrantView",
    "MembershipPurchaseView",
    "MyMembershipView",
    "TierListView",
]
