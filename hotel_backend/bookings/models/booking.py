# bookings/models/booking.py

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone


class Booking(models.Model):
    """
    A guest reservation spanning one or more rooms.

    GUARANTEES:
    - balance == total_amount - total_paid
    - total_paid is DERIVED from booking rooms (bookings.services.booking_totals)
    - Status changes go through bookings.services.booking_lifecycle
    """

    STATUS_PENDING = "PENDING"
    STATUS_CONFIRMED = "CONFIRMED"
    STATUS_CHECKED_IN = "CHECKED_IN"
    STATUS_CHECKED_OUT = "CHECKED_OUT"
    STATUS_CANCELLED = "CANCELLED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_CHECKED_IN, "Checked in"),
        (STATUS_CHECKED_OUT, "Checked out"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    booking_code = models.CharField(
        max_length=32,
        unique=True,
        blank=True,
        help_text="System-generated booking reference",
    )

    customer = models.ForeignKey(
        "bookings.Customer",
        on_delete=models.PROTECT,
        related_name="bookings",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
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

    check_in = models.DateField(null=True, blank=True)
    check_out = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="bookings_status_idx"),
            models.Index(fields=["booking_code"], name="bookings_code_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.booking_code:
            prefix = timezone.now().strftime("BK%Y%m%d")
            self.booking_code = f"{prefix}-{uuid.uuid4().hex[:6].upper()}"

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.booking_code} | {self.status}"
