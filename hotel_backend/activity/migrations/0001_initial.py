# activity/migrations/0001_initial.py

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        ("hotel_services", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        max_length=40,
                        choices=[
                            ("CREATE_BOOKING", "Create booking"),
                            ("UPDATE_BOOKING", "Update booking"),
                            ("UPDATE_BOOKING_ROOM", "Update booking room"),
                            ("CREATE_SERVICE_USAGE", "Create service usage"),
                            ("UPDATE_SERVICE_USAGE", "Update service usage"),
                            ("CREATE_TRANSACTION", "Create transaction"),
                            ("CREATE_PROMOTION", "Create promotion"),
                            ("UPDATE_PROMOTION", "Update promotion"),
                            ("CLAIM_PROMOTION", "Claim promotion"),
                        ],
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("metadata", models.JSONField(default=dict, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "employee",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="activities",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        to="bookings.customer",
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="activities",
                    ),
                ),
                (
                    "booking_room",
                    models.ForeignKey(
                        to="bookings.bookingroom",
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="activities",
                    ),
                ),
                (
                    "service_usage",
                    models.ForeignKey(
                        to="hotel_services.serviceusage",
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="activities",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["type"], name="activity_type_idx"),
                    models.Index(fields=["created_at"], name="activity_created_idx"),
                ],
            },
        ),
    ]
