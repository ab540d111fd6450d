# hotel_services/models/service.py

import uuid
from decimal import Decimal

from django.db import models


class Service(models.Model):
    """
    Catalogue entry (laundry, minibar, spa...).
    Usages snapshot the price at creation time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200, unique=True)
    unit = models.CharField(max_length=50, blank=True, default="")
    price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
