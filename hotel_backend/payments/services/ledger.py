# payments/services/ledger.py

"""
PAYMENT LEDGER (SINGLE WRITE ENTRY POINT FOR BALANCES)

apply_allocation is the only place a payment moves money onto rooms,
service usages and bookings.

Per allocation line:
- the granted discount reduces the target's charge
  (BookingRoom.total_amount / ServiceUsage.total_price)
- total_paid += line amount
- balance = charge - total_paid
Room discounts also reduce the owning booking's total_amount.
Booking totals are then re-derived from the rooms.

GUARANTEES:
- no target ends with a negative balance
- service lines go through the service-usage manager (auto-completion)
- must run inside the payment's atomic block, on locked rows
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models import F

from backend.exceptions import BadRequestError
from bookings.models import Booking, BookingRoom
from bookings.services.booking_totals import update_booking_totals
from hotel_services.services.usage_service import record_usage_payment

logger = logging.getLogger("payments")

ZERO = Decimal("0.00")


def _apply_room(*, room: BookingRoom, amount: Decimal, discount: Decimal):
    balance = Decimal(room.total_amount) - Decimal(room.total_paid)
    if amount + discount > balance:
        raise BadRequestError(
            f"Allocation exceeds the outstanding balance of room {room.room_number}"
        )

    room.total_amount = Decimal(room.total_amount) - discount
    room.total_paid = Decimal(room.total_paid) + amount
    # save() re-derives balance
    room.save(update_fields=["total_amount", "total_paid", "balance"])


def apply_allocation(*, booking: Booking | None, entries, employee=None) -> Booking | None:
    """
    entries: iterable of (line, detail) pairs, in line order.
    Returns the refreshed booking (None for guest payments).
    """
    room_discount_total = ZERO

    for line, detail in entries:
        amount = Decimal(detail.amount)
        discount = Decimal(detail.discount_amount)

        if amount < ZERO or discount < ZERO:
            raise BadRequestError("Allocation amounts cannot be negative")

        if line.booking_room is not None:
            _apply_room(room=line.booking_room, amount=amount, discount=discount)
            room_discount_total += discount
        else:
            record_usage_payment(
                usage=line.service_usage,
                amount=amount,
                discount=discount,
                employee=employee,
            )

    if booking is None:
        return None

    if room_discount_total > ZERO:
        Booking.objects.filter(pk=booking.pk).update(
            total_amount=F("total_amount") - room_discount_total
        )

    refreshed = update_booking_totals(booking.pk)

    logger.info(
        "Allocation applied",
        extra={
            "booking_id": str(booking.pk),
            "total_paid": str(refreshed.total_paid),
            "balance": str(refreshed.balance),
        },
    )

    return refreshed
