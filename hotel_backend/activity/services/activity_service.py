# activity/services/activity_service.py

"""
ACTIVITY LOGGER

Records one immutable Activity row per business event.

RULES:
- Runs inside the caller's unit of work, in its own savepoint
- A logging failure NEVER aborts the caller (the savepoint is rolled back,
  the failure is logged, the payment / claim / usage change proceeds)
- ACTIVITY_LOGGING_ENABLED=False turns recording off entirely
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import transaction

from activity.models import Activity

logger = logging.getLogger("activity")


def _jsonable(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def record_activity(
    *,
    type: str,
    description: str = "",
    metadata: dict | None = None,
    employee=None,
    customer=None,
    booking_room=None,
    service_usage=None,
) -> Activity | None:
    """
    Returns the created Activity, or None when disabled or when recording failed.
    """
    if not getattr(settings, "ACTIVITY_LOGGING_ENABLED", True):
        return None

    if employee is not None and not getattr(employee, "is_authenticated", False):
        employee = None

    try:
        with transaction.atomic():
            return Activity.objects.create(
                type=type,
                description=description or "",
                metadata=_jsonable(metadata or {}),
                employee=employee,
                customer=customer,
                booking_room=booking_room,
                service_usage=service_usage,
            )
    except Exception:
        logger.exception(
            "Activity recording failed",
            extra={"activity_type": type},
        )
        return None


def record_payment_activity(*, transaction_obj, details, employee, booking=None, service_usage=None):
    """
    One CREATE_TRANSACTION event per payment.
    Guest payments have no Transaction row; the service usage carries the event.
    """
    amount = sum((Decimal(d.amount) for d in details), Decimal("0.00"))

    if transaction_obj is not None:
        description = (
            f"Created {transaction_obj.type.lower()} transaction "
            f"of {transaction_obj.amount} via {transaction_obj.method}"
        )
        metadata = {
            "transaction_id": transaction_obj.id,
            "transaction_type": transaction_obj.type,
            "method": transaction_obj.method,
            "base_amount": transaction_obj.base_amount,
            "discount_amount": transaction_obj.discount_amount,
            "amount": transaction_obj.amount,
            "booking_id": transaction_obj.booking_id,
            "detail_ids": [d.id for d in details],
        }
    else:
        description = f"Guest service payment of {amount}"
        metadata = {
            "amount": amount,
            "detail_ids": [d.id for d in details],
        }

    if booking is not None:
        customer = booking.customer
    else:
        customer = getattr(service_usage, "customer", None)

    booking_room = None
    room_ids = {d.booking_room_id for d in details if d.booking_room_id}
    if len(room_ids) == 1:
        booking_room = next(d.booking_room for d in details if d.booking_room_id)

    return record_activity(
        type=Activity.TYPE_CREATE_TRANSACTION,
        description=description,
        metadata=metadata,
        employee=employee,
        customer=customer,
        booking_room=booking_room,
        service_usage=service_usage,
    )
