# hotel_services/services/usage_lifecycle.py

"""
SERVICE USAGE LIFECYCLE DOMAIN RULES

Allowed manual transitions:

    PENDING     -> TRANSFERRED | CANCELLED
    TRANSFERRED -> COMPLETED   | CANCELLED
    COMPLETED, CANCELLED: terminal

Payment-driven completion is NOT a manual transition: a usage whose
total_paid reaches total_price becomes COMPLETED from any non-terminal
status (including PENDING). See `should_complete_on_payment`.
"""

from __future__ import annotations

from decimal import Decimal

from backend.exceptions import BadRequestError, InvalidTransitionError
from hotel_services.models import ServiceUsage

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    ServiceUsage.STATUS_COMPLETED,
    ServiceUsage.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    ServiceUsage.STATUS_PENDING: {
        ServiceUsage.STATUS_TRANSFERRED,
        ServiceUsage.STATUS_CANCELLED,
    },
    ServiceUsage.STATUS_TRANSFERRED: {
        ServiceUsage.STATUS_COMPLETED,
        ServiceUsage.STATUS_CANCELLED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, usage: ServiceUsage, target_status: str):
    if usage.status in TERMINAL_STATES:
        raise InvalidTransitionError(
            f"Cannot change status of {usage.status.lower()} service"
        )

    if not can_transition(from_status=usage.status, to_status=target_status):
        raise InvalidTransitionError(
            f"Service usage cannot transition from "
            f"'{usage.status}' to '{target_status}'"
        )


def validate_quantity_edit(*, usage: ServiceUsage):
    if usage.status == ServiceUsage.STATUS_TRANSFERRED:
        raise BadRequestError(
            "Cannot update quantity for service that has been transferred to user"
        )
    if usage.status == ServiceUsage.STATUS_COMPLETED:
        raise BadRequestError(
            "Cannot update quantity for service that has been completed"
        )
    if usage.status == ServiceUsage.STATUS_CANCELLED:
        raise BadRequestError(
            "Cannot update quantity for service that has been cancelled"
        )


def validate_payable(*, usage: ServiceUsage):
    if usage.status == ServiceUsage.STATUS_CANCELLED:
        raise BadRequestError("Cannot pay for cancelled service")


def should_complete_on_payment(*, usage: ServiceUsage) -> bool:
    if usage.status in TERMINAL_STATES:
        return False

    return Decimal(usage.total_paid) >= Decimal(usage.total_price)
