# bookings/services/booking_lifecycle.py

"""
BOOKING LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions
for Booking and BookingRoom entities (they share one status vocabulary).

DESIGN PRINCIPLES:
- Transition table is the single source of truth
- validate_* functions perform no writes
- apply_* functions mutate the instance only; callers persist
"""

from __future__ import annotations

from backend.exceptions import InvalidTransitionError
from bookings.models import Booking

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Booking.STATUS_CHECKED_OUT,
    Booking.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Booking.STATUS_PENDING: {
        Booking.STATUS_CONFIRMED,
        Booking.STATUS_CANCELLED,
    },
    Booking.STATUS_CONFIRMED: {
        Booking.STATUS_CHECKED_IN,
        Booking.STATUS_CANCELLED,
    },
    Booking.STATUS_CHECKED_IN: {
        Booking.STATUS_CHECKED_OUT,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, instance, target_status: str):
    """
    `instance` is a Booking or a BookingRoom.
    """
    if not can_transition(
        from_status=instance.status,
        to_status=target_status,
    ):
        label = instance.__class__.__name__
        raise InvalidTransitionError(
            f"{label} {instance.id} cannot transition from "
            f"'{instance.status}' to '{target_status}'"
        )


def apply_transition(*, instance, target_status: str) -> bool:
    """
    Validate and set the new status on the instance.
    Returns True when the status changed (caller saves).
    """
    validate_transition(instance=instance, target_status=target_status)
    instance.status = target_status
    return True


def confirm_if_pending(instance) -> bool:
    """
    Deposit rule: PENDING -> CONFIRMED; any other status is left alone.
    """
    if instance.status != Booking.STATUS_PENDING:
        return False

    return apply_transition(instance=instance, target_status=Booking.STATUS_CONFIRMED)
