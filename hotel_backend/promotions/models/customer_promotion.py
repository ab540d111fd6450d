# promotions/models/customer_promotion.py

import uuid

from django.db import models
from django.utils import timezone


class CustomerPromotion(models.Model):
    """
    A customer's claim on a promotion.

    AVAILABLE -> USED (applied to a payment) | EXPIRED (promotion ended)
    USED and EXPIRED are terminal.
    """

    STATUS_AVAILABLE = "AVAILABLE"
    STATUS_USED = "USED"
    STATUS_EXPIRED = "EXPIRED"

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, "Available"),
        (STATUS_USED, "Used"),
        (STATUS_EXPIRED, "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        "bookings.Customer",
        on_delete=models.CASCADE,
        related_name="customer_promotions",
    )
    promotion = models.ForeignKey(
        "promotions.Promotion",
        on_delete=models.PROTECT,
        related_name="customer_promotions",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE,
    )

    claimed_at = models.DateTimeField(default=timezone.now)
    used_at = models.DateTimeField(null=True, blank=True)

    transaction_detail = models.ForeignKey(
        "payments.TransactionDetail",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customer_promotions",
    )

    class Meta:
        ordering = ["-claimed_at"]
        indexes = [
            models.Index(fields=["customer", "status"], name="cust_promo_status_idx"),
        ]

    def __str__(self):
        return f"{self.customer_id} | {self.promotion_id} | {self.status}"
