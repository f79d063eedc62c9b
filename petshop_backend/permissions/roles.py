# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
# Staff job roles + the storefront customer role.
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_SUPPORT = "support"
ROLE_CUSTOMER = "customer"


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_CATALOG_EDIT = "catalog.edit"
CAP_INVENTORY_ADJUST = "inventory.adjust"
CAP_ORDERS_MANAGE = "orders.manage"
CAP_COUPONS_MANAGE = "coupons.manage"
CAP_CONTENT_EDIT = "content.edit"
CAP_MEMBERS_MANAGE = "members.manage"
CAP_WALLET_ADJUST = "wallet.adjust"

ALL_CAPABILITIES = {
    CAP_CATALOG_EDIT,
    CAP_INVENTORY_ADJUST,
    CAP_ORDERS_MANAGE,
    CAP_COUPONS_MANAGE,
    CAP_CONTENT_EDIT,
    CAP_MEMBERS_MANAGE,
    CAP_WALLET_ADJUST,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_CATALOG_EDIT,
        CAP_INVENTORY_ADJUST,
        CAP_ORDERS_MANAGE,
        CAP_COUPONS_MANAGE,
        CAP_CONTENT_EDIT,
    },
    ROLE_SUPPORT: {
        CAP_ORDERS_MANAGE,
    },
    ROLE_CUSTOMER: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    """
    Capabilities come from the role. Superusers always get everything.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)

    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_ORDERS_MANAGE
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # deny when unset
            return False

        return user_has_capability(request.user, required)

