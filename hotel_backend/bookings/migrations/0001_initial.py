# bookings/migrations/0001_initial.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("CONFIRMED", "Confirmed"),
    ("CHECKED_IN", "Checked in"),
    ("CHECKED_OUT", "Checked out"),
    ("CANCELLED", "Cancelled"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
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
                ("full_name", models.CharField(max_length=200)),
                ("phone", models.CharField(max_length=50, blank=True, default="")),
                ("email", models.EmailField(max_length=254, blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="Booking",
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
                    "booking_code",
                    models.CharField(
                        max_length=32,
                        unique=True,
                        blank=True,
                        help_text="System-generated booking reference",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=20,
                        choices=STATUS_CHOICES,
                        default="PENDING",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "total_paid",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "balance",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                ("check_in", models.DateField(null=True, blank=True)),
                ("check_out", models.DateField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "customer",
                    models.ForeignKey(
                        to="bookings.customer",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="bookings_status_idx"),
                    models.Index(fields=["booking_code"], name="bookings_code_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BookingRoom",
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
                ("room_number", models.CharField(max_length=16)),
                (
                    "price_per_night",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                ("nights", models.PositiveIntegerField(default=1)),
                (
                    "subtotal_room",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "total_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "total_paid",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "balance",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=20,
                        choices=STATUS_CHOICES,
                        default="PENDING",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now, db_index=True),
                ),
                (
                    "booking",
                    models.ForeignKey(
                        to="bookings.booking",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="booking_rooms",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_paid__gte=Decimal("0.00")),
                        name="booking_room_total_paid_nonnegative",
                    ),
                ],
            },
        ),
    ]
