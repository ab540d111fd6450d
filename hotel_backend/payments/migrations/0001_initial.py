# payments/migrations/0001_initial.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        ("hotel_services", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Transaction",
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
                        max_length=20,
                        choices=[
                            ("DEPOSIT", "Deposit"),
                            ("ROOM_CHARGE", "Room charge"),
                            ("SERVICE_CHARGE", "Service charge"),
                            ("REFUND", "Refund"),
                            ("ADJUSTMENT", "Adjustment"),
                        ],
                    ),
                ),
                (
                    "method",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("CASH", "Cash"),
                            ("CARD", "Card"),
                            ("BANK_TRANSFER", "Bank transfer"),
                            ("E_WALLET", "E-wallet"),
                            ("OTHER", "Other"),
                        ],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=20,
                        choices=[("COMPLETED", "Completed")],
                        default="COMPLETED",
                    ),
                ),
                (
                    "base_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "discount_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                ("transaction_ref", models.CharField(max_length=100, blank=True, default="")),
                ("description", models.TextField(blank=True, default="")),
                ("occurred_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "booking",
                    models.ForeignKey(
                        to="bookings.booking",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="transactions",
                    ),
                ),
                (
                    "processed_by",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="processed_transactions",
                    ),
                ),
            ],
            options={
                "ordering": ["-occurred_at", "-created_at"],
                "indexes": [
                    models.Index(fields=["type"], name="transaction_type_idx"),
                    models.Index(fields=["occurred_at"], name="transaction_occurred_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransactionDetail",
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
                    "base_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "discount_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "transaction",
                    models.ForeignKey(
                        to="payments.transaction",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="details",
                    ),
                ),
                (
                    "booking_room",
                    models.ForeignKey(
                        to="bookings.bookingroom",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="transaction_details",
                    ),
                ),
                (
                    "service_usage",
                    models.ForeignKey(
                        to="hotel_services.serviceusage",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="transaction_details",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "constraints": [
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
                ],
            },
        ),
    ]
