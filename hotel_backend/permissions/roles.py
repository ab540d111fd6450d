# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# Roles are Django auth Group names. Superusers are always admin.
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_RECEPTIONIST = "receptionist"
ROLE_CASHIER = "cashier"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_RECEPTIONIST,
    ROLE_CASHIER,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_PAYMENTS_COLLECT = "payments.collect"
CAP_PAYMENTS_VIEW = "payments.view"

CAP_PROMOTIONS_MANAGE = "promotions.manage"
CAP_PROMOTIONS_CLAIM = "promotions.claim"

CAP_SERVICES_MANAGE = "services.manage"

CAP_BOOKINGS_VIEW = "bookings.view"

ALL_CAPABILITIES = {
    CAP_PAYMENTS_COLLECT,
    CAP_PAYMENTS_VIEW,
    CAP_PROMOTIONS_MANAGE,
    CAP_PROMOTIONS_CLAIM,
    CAP_SERVICES_MANAGE,
    CAP_BOOKINGS_VIEW,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_PAYMENTS_COLLECT,
        CAP_PAYMENTS_VIEW,
        CAP_PROMOTIONS_MANAGE,
        CAP_PROMOTIONS_CLAIM,
        CAP_SERVICES_MANAGE,
        CAP_BOOKINGS_VIEW,
    },
    ROLE_RECEPTIONIST: {
        CAP_PAYMENTS_COLLECT,
        CAP_PAYMENTS_VIEW,
        CAP_PROMOTIONS_CLAIM,
        CAP_SERVICES_MANAGE,
        CAP_BOOKINGS_VIEW,
    },
    ROLE_CASHIER: {
        CAP_PAYMENTS_COLLECT,
        CAP_PAYMENTS_VIEW,
        CAP_BOOKINGS_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    """
    Superuser -> admin, otherwise the first auth group that names a role.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None

    if getattr(user, "is_superuser", False):
        return ROLE_ADMIN

    group_names = set(user.groups.values_list("name", flat=True))
    for role in (ROLE_ADMIN, ROLE_MANAGER, ROLE_RECEPTIONIST, ROLE_CASHIER):
        if role in group_names:
            return role

    return None


def effective_capabilities_for(user) -> set[str]:
    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_PAYMENTS_COLLECT
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # Deny-by-default when the view forgot to declare one
            return False

        return required in effective_capabilities_for(user)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_PAYMENTS_VIEW, CAP_BOOKINGS_VIEW}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = effective_capabilities_for(user)
        return any(cap in caps for cap in set(required))
