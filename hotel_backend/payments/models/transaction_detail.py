# payments/models/transaction_detail.py

"""
TRANSACTION DETAIL (ONE ALLOCATION LINE, IMMUTABLE)

Targets exactly one of:
- a BookingRoom (room charge)
- a ServiceUsage (service charge)

transaction is null only for guest-service payments.
"""

import uuid
from decimal import Decimal

from django.db import models


class TransactionDetail(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    transaction = models.ForeignKey(
        "payments.Transaction",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="details",
    )

    booking_room = models.ForeignKey(
        "bookings.BookingRoom",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transaction_details",
    )
    service_usage = models.ForeignKey(
        "hotel_services.ServiceUsage",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transaction_details",
    )

    base_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(booking_room__isnull=False, service_usage__isnull=True)
                    | models.Q(booking_room__isnull=True, service_usage__isnull=False)
                ),
                name="transaction_detail_exactly_one_target",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_amount__lte=models.F("base_amount")),
                name="transaction_detail_discount_within_base",
            ),
        ]

    @property
    def target_type(self) -> str:
        return "room" if self.booking_room_id else "service"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("TransactionDetail records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("TransactionDetail records cannot be deleted")

    def __str__(self):
        return f"{self.target_type} | {self.amount}"
