# promotions/models/promotion.py

"""
PROMOTION

Staff-defined discount terms that customers claim and later apply to a payment.

Notes:
- remaining_qty mirrors total_qty and is decremented on claim (null = unlimited)
- disabled_at set => promotion is disabled from that instant on
- Eligibility rules live in promotions.services (validator / lifecycle)
"""

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone


class Promotion(models.Model):
    TYPE_PERCENTAGE = "PERCENTAGE"
    TYPE_FIXED_AMOUNT = "FIXED_AMOUNT"

    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, "Percentage"),
        (TYPE_FIXED_AMOUNT, "Fixed amount"),
    ]

    SCOPE_ALL = "ALL"
    SCOPE_ROOM = "ROOM"
    SCOPE_SERVICE = "SERVICE"

    SCOPE_CHOICES = [
        (SCOPE_ALL, "All charges"),
        (SCOPE_ROOM, "Room charges"),
        (SCOPE_SERVICE, "Service charges"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True, default="")

    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    scope = models.CharField(max_length=20, choices=SCOPE_CHOICES, default=SCOPE_ALL)

    value = models.DecimalField(max_digits=12, decimal_places=2)
    max_discount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    min_booking_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    total_qty = models.PositiveIntegerField(null=True, blank=True)
    remaining_qty = models.IntegerField(null=True, blank=True)
    per_customer_limit = models.PositiveIntegerField(default=1)

    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    disabled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code"], name="promotion_code_idx"),
            models.Index(fields=["start_date", "end_date"], name="promotion_window_idx"),
        ]

    # ----------------------------
    # Derived state
    # ----------------------------
    def is_disabled(self, now=None) -> bool:
        now = now or timezone.now()
        return self.disabled_at is not None and self.disabled_at <= now

    def is_within_window(self, now=None) -> bool:
        now = now or timezone.now()
        return self.start_date <= now <= self.end_date

    @property
    def is_unlimited(self) -> bool:
        return self.remaining_qty is None

    def __str__(self):
        return f"{self.code} | {self.type} {self.value}"
