# promotions/models/used_promotion.py

"""
USED PROMOTION (IMMUTABLE LEDGER RECORD)

One row per discount actually granted on a payment.
Created once. Never updated. Never deleted.
"""

import uuid
from decimal import Decimal

from django.db import models


class UsedPromotion(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    promotion = models.ForeignKey(
        "promotions.Promotion",
        on_delete=models.PROTECT,
        related_name="used_promotions",
    )
    customer_promotion = models.ForeignKey(
        "promotions.CustomerPromotion",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="used_promotions",
    )

    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    transaction_detail = models.ForeignKey(
        "payments.TransactionDetail",
        on_delete=models.PROTECT,
        related_name="used_promotions",
    )
    transaction = models.ForeignKey(
        "payments.Transaction",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="used_promotions",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("UsedPromotion records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("UsedPromotion records cannot be deleted")

    def __str__(self):
        return f"{self.promotion_id} | -{self.discount_amount}"
