# promotions/services/promotion_lifecycle.py

"""
CUSTOMER PROMOTION LIFECYCLE DOMAIN RULES

    AVAILABLE -> USED | EXPIRED
    USED, EXPIRED: terminal
"""

from __future__ import annotations

from django.utils import timezone

from backend.exceptions import InvalidTransitionError
from promotions.models import CustomerPromotion

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    CustomerPromotion.STATUS_USED,
    CustomerPromotion.STATUS_EXPIRED,
}

ALLOWED_TRANSITIONS = {
    CustomerPromotion.STATUS_AVAILABLE: {
        CustomerPromotion.STATUS_USED,
        CustomerPromotion.STATUS_EXPIRED,
    },
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, customer_promotion: CustomerPromotion, target_status: str):
    if not can_transition(
        from_status=customer_promotion.status,
        to_status=target_status,
    ):
        raise InvalidTransitionError(
            f"Customer promotion {customer_promotion.id} cannot transition from "
            f"'{customer_promotion.status}' to '{target_status}'"
        )


# ============================================================
# APPLY (MARK USED)
# ============================================================


def mark_used(*, customer_promotion: CustomerPromotion, transaction_detail, now=None):
    """
    Caller holds the row lock (payment atomic block).
    """
    validate_transition(
        customer_promotion=customer_promotion,
        target_status=CustomerPromotion.STATUS_USED,
    )

    customer_promotion.status = CustomerPromotion.STATUS_USED
    customer_promotion.used_at = now or timezone.now()
    customer_promotion.transaction_detail = transaction_detail
    customer_promotion.save(update_fields=["status", "used_at", "transaction_detail"])

    return customer_promotion
