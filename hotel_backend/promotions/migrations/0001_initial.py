# promotions/migrations/0001_initial.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        ("payments", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Promotion",
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
                ("code", models.CharField(max_length=50, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "type",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("PERCENTAGE", "Percentage"),
                            ("FIXED_AMOUNT", "Fixed amount"),
                        ],
                    ),
                ),
                (
                    "scope",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("ALL", "All charges"),
                            ("ROOM", "Room charges"),
                            ("SERVICE", "Service charges"),
                        ],
                        default="ALL",
                    ),
                ),
                ("value", models.DecimalField(max_digits=12, decimal_places=2)),
                (
                    "max_discount",
                    models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True),
                ),
                (
                    "min_booking_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                ("total_qty", models.PositiveIntegerField(null=True, blank=True)),
                ("remaining_qty", models.IntegerField(null=True, blank=True)),
                ("per_customer_limit", models.PositiveIntegerField(default=1)),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                ("disabled_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["code"], name="promotion_code_idx"),
                    models.Index(fields=["start_date", "end_date"], name="promotion_window_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CustomerPromotion",
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
                    "status",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("AVAILABLE", "Available"),
                            ("USED", "Used"),
                            ("EXPIRED", "Expired"),
                        ],
                        default="AVAILABLE",
                    ),
                ),
                ("claimed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("used_at", models.DateTimeField(null=True, blank=True)),
                (
                    "customer",
                    models.ForeignKey(
                        to="bookings.customer",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customer_promotions",
                    ),
                ),
                (
                    "promotion",
                    models.ForeignKey(
                        to="promotions.promotion",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="customer_promotions",
                    ),
                ),
                (
                    "transaction_detail",
                    models.ForeignKey(
                        to="payments.transactiondetail",
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="customer_promotions",
                    ),
                ),
            ],
            options={
                "ordering": ["-claimed_at"],
                "indexes": [
                    models.Index(fields=["customer", "status"], name="cust_promo_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UsedPromotion",
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
                    "discount_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "promotion",
                    models.ForeignKey(
                        to="promotions.promotion",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="used_promotions",
                    ),
                ),
                (
                    "customer_promotion",
                    models.ForeignKey(
                        to="promotions.customerpromotion",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="used_promotions",
                    ),
                ),
                (
                    "transaction_detail",
                    models.ForeignKey(
                        to="payments.transactiondetail",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="used_promotions",
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        to="payments.transaction",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="used_promotions",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
    ]
