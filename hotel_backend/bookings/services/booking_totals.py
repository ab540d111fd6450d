# bookings/services/booking_totals.py

"""
BOOKING TOTALS UPDATER (AUTHORITATIVE)

This module answers ONE question:
"What has been paid on this booking, and what is still owed?"

RULES:
- total_paid is ALWAYS re-derived from the booking's rooms, never patched
  incrementally (a multi-room allocation cannot leave drift behind)
- balance = booking.total_amount - total_paid
- Must be called inside the caller's atomic block
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce

from backend.exceptions import NotFoundError
from bookings.models import Booking, BookingRoom


def update_booking_totals(booking_id) -> Booking:
    try:
        booking = Booking.objects.select_for_update().get(pk=booking_id)
    except Booking.DoesNotExist as exc:
        raise NotFoundError("Booking not found") from exc

    aggregates = BookingRoom.objects.filter(booking_id=booking.pk).aggregate(
        total_paid=Coalesce(Sum("total_paid"), Decimal("0.00")),
    )

    total_paid = Decimal(aggregates["total_paid"])

    booking.total_paid = total_paid
    booking.balance = Decimal(booking.total_amount) - total_paid
    booking.save(update_fields=["total_paid", "balance"])

    return booking
