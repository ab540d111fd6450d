# hotel_services/models/service_usage.py

"""
SERVICE USAGE

A service consumed by a guest, a booking, or one room of a booking.

Ownership (derived from the two optional links):
- neither booking nor booking_room -> guest usage (paid on its own)
- booking only                     -> booking-level usage
- booking + booking_room           -> room-specific usage

Money:
- total_price = unit_price x quantity (snapshot; zeroed on cancel)
- balance is DERIVED: total_price - total_paid
- total_paid only moves through hotel_services.services.usage_service
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class ServiceUsage(models.Model):
    STATUS_PENDING = "PENDING"
    STATUS_TRANSFERRED = "TRANSFERRED"
    STATUS_COMPLETED = "COMPLETED"
    STATUS_CANCELLED = "CANCELLED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_TRANSFERRED, "Transferred"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="service_usages",
    )
    booking_room = models.ForeignKey(
        "bookings.BookingRoom",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="service_usages",
    )
    service = models.ForeignKey(
        "hotel_services.Service",
        on_delete=models.PROTECT,
        related_name="usages",
    )

    # Guest usages only; booking usages resolve the customer via the booking.
    customer = models.ForeignKey(
        "bookings.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service_usages",
    )

    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_paid = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    employee = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service_usages",
    )

    # Charge-line order inside a room is creation order.
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["status"], name="service_usage_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_paid__gte=Decimal("0.00")),
                name="service_usage_total_paid_nonnegative",
            ),
        ]

    # ----------------------------
    # Derived
    # ----------------------------
    @property
    def balance(self) -> Decimal:
        return Decimal(self.total_price) - Decimal(self.total_paid)

    @property
    def is_guest_usage(self) -> bool:
        return self.booking_id is None and self.booking_room_id is None

    def __str__(self):
        return f"{self.service_id} x{self.quantity} | {self.status}"
