# payments/models/transaction.py

"""
TRANSACTION (IMMUTABLE)

One row per payment call (except guest-service payments, which only
produce a TransactionDetail).

GUARANTEES:
- amount == base_amount - discount_amount
- Σ details.amount == amount, Σ details.base_amount == base_amount
- Created once by payments.services.payment_orchestrator; never updated
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Transaction(models.Model):
    TYPE_DEPOSIT = "DEPOSIT"
    TYPE_ROOM_CHARGE = "ROOM_CHARGE"
    TYPE_SERVICE_CHARGE = "SERVICE_CHARGE"
    TYPE_REFUND = "REFUND"
    TYPE_ADJUSTMENT = "ADJUSTMENT"

    TYPE_CHOICES = [
        (TYPE_DEPOSIT, "Deposit"),
        (TYPE_ROOM_CHARGE, "Room charge"),
        (TYPE_SERVICE_CHARGE, "Service charge"),
        (TYPE_REFUND, "Refund"),
        (TYPE_ADJUSTMENT, "Adjustment"),
    ]

    # Opaque tags; no gateway integration.
    METHOD_CASH = "CASH"
    METHOD_CARD = "CARD"
    METHOD_BANK_TRANSFER = "BANK_TRANSFER"
    METHOD_E_WALLET = "E_WALLET"
    METHOD_OTHER = "OTHER"

    METHOD_CHOICES = [
        (METHOD_CASH, "Cash"),
        (METHOD_CARD, "Card"),
        (METHOD_BANK_TRANSFER, "Bank transfer"),
        (METHOD_E_WALLET, "E-wallet"),
        (METHOD_OTHER, "Other"),
    ]

    STATUS_COMPLETED = "COMPLETED"

    STATUS_CHOICES = [
        (STATUS_COMPLETED, "Completed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transactions",
    )

    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED,
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

    transaction_ref = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")

    processed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="processed_transactions",
    )

    occurred_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-occurred_at", "-created_at"]
        indexes = [
            models.Index(fields=["type"], name="transaction_type_idx"),
            models.Index(fields=["occurred_at"], name="transaction_occurred_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("Transaction records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("Transaction records cannot be deleted")

    def __str__(self):
        return f"{self.type} | {self.amount} | {self.method}"
