# activity/models/activity.py

"""
ACTIVITY (IMMUTABLE AUDIT EVENT)

One row per business event (payment, service usage change, promotion claim).
Created once. Never updated. Never deleted.
"""

import uuid

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Activity(models.Model):
    TYPE_CREATE_BOOKING = "CREATE_BOOKING"
    TYPE_UPDATE_BOOKING = "UPDATE_BOOKING"
    TYPE_UPDATE_BOOKING_ROOM = "UPDATE_BOOKING_ROOM"
    TYPE_CREATE_SERVICE_USAGE = "CREATE_SERVICE_USAGE"
    TYPE_UPDATE_SERVICE_USAGE = "UPDATE_SERVICE_USAGE"
    TYPE_CREATE_TRANSACTION = "CREATE_TRANSACTION"
    TYPE_CREATE_PROMOTION = "CREATE_PROMOTION"
    TYPE_UPDATE_PROMOTION = "UPDATE_PROMOTION"
    TYPE_CLAIM_PROMOTION = "CLAIM_PROMOTION"

    TYPE_CHOICES = [
        (TYPE_CREATE_BOOKING, "Create booking"),
        (TYPE_UPDATE_BOOKING, "Update booking"),
        (TYPE_UPDATE_BOOKING_ROOM, "Update booking room"),
        (TYPE_CREATE_SERVICE_USAGE, "Create service usage"),
        (TYPE_UPDATE_SERVICE_USAGE, "Update service usage"),
        (TYPE_CREATE_TRANSACTION, "Create transaction"),
        (TYPE_CREATE_PROMOTION, "Create promotion"),
        (TYPE_UPDATE_PROMOTION, "Update promotion"),
        (TYPE_CLAIM_PROMOTION, "Claim promotion"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    type = models.CharField(max_length=40, choices=TYPE_CHOICES)
    description = models.TextField(blank=True, default="")
    metadata = models.JSONField(default=dict, blank=True)

    employee = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    customer = models.ForeignKey(
        "bookings.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    booking_room = models.ForeignKey(
        "bookings.BookingRoom",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    service_usage = models.ForeignKey(
        "hotel_services.ServiceUsage",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["type"], name="activity_type_idx"),
            models.Index(fields=["created_at"], name="activity_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("Activity records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("Activity records cannot be deleted")

    def __str__(self):
        return f"{self.type} | {self.created_at}"
