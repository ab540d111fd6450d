# bookings/models/booking_room.py

"""
BOOKING ROOM

One room's allocation within a booking, with its own charge and payment state.

Notes:
- subtotal_room = price_per_night x nights (room-only charge, snapshot)
- total_amount is the room charge still billable on this row; it starts at
  subtotal_room and is reduced only when a promotion discount is granted on it
- Services attached to the room carry their own balances (ServiceUsage)
"""

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone

from .booking import Booking


class BookingRoom(models.Model):
    STATUS_CHOICES = Booking.STATUS_CHOICES

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="booking_rooms",
    )

    room_number = models.CharField(max_length=16)

    price_per_night = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    nights = models.PositiveIntegerField(default=1)

    subtotal_room = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_paid = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    balance = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=Booking.STATUS_PENDING,
    )

    # Room order inside a booking is creation order.
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_paid__gte=Decimal("0.00")),
                name="booking_room_total_paid_nonnegative",
            ),
        ]

    def save(self, *args, **kwargs):
        # Charge snapshot is computed once, on creation.
        if self._state.adding:
            if not self.subtotal_room:
                self.subtotal_room = Decimal(self.price_per_night) * Decimal(
                    int(self.nights or 0)
                )
            if not self.total_amount:
                self.total_amount = self.subtotal_room

        self.balance = Decimal(self.total_amount) - Decimal(self.total_paid)

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.booking_id} | room {self.room_number}"
