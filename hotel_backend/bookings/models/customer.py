# bookings/models/customer.py

import uuid

from django.db import models


class Customer(models.Model):
    """
    Hotel guest.

    Only the fields the payment engine needs (booking owner, promotion holder).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["full_name"]

    def __str__(self):
        return self.full_name
