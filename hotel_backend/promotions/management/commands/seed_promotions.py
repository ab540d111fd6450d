# promotions/management/commands/seed_promotions.py

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from promotions.models import Promotion

# code, description, type, scope, value, max_discount, min_booking_amount,
# total_qty, per_customer_limit
PROMOTIONS_DATA = [
    (
        "WELCOME2024",
        "Welcome discount for new customers",
        Promotion.TYPE_PERCENTAGE,
        Promotion.SCOPE_ALL,
        Decimal("10"),
        Decimal("500000"),
        Decimal("1000000"),
        100,
        1,
    ),
    (
        "ROOM50K",
        "Flat discount on room charges",
        Promotion.TYPE_FIXED_AMOUNT,
        Promotion.SCOPE_ROOM,
        Decimal("50000"),
        None,
        Decimal("500000"),
        None,
        3,
    ),
    (
        "SERVICE20",
        "20% off hotel services",
        Promotion.TYPE_PERCENTAGE,
        Promotion.SCOPE_SERVICE,
        Decimal("20"),
        Decimal("200000"),
        Decimal("0"),
        50,
        2,
    ),
    (
        "SUMMER2024",
        "Summer season discount",
        Promotion.TYPE_PERCENTAGE,
        Promotion.SCOPE_ALL,
        Decimal("15"),
        Decimal("1000000"),
        Decimal("2000000"),
        200,
        1,
    ),
]


class Command(BaseCommand):
    help = "Seed the reference promotions (valid from now for three months)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding promotions..."))

        start = timezone.now()
        end = start + timedelta(days=90)

        created_count = 0
        for (
            code,
            description,
            promo_type,
            scope,
            value,
            max_discount,
            min_booking_amount,
            total_qty,
            per_customer_limit,
        ) in PROMOTIONS_DATA:
            _, created = Promotion.objects.get_or_create(
                code=code,
                defaults={
                    "description": description,
                    "type": promo_type,
                    "scope": scope,
                    "value": value,
                    "max_discount": max_discount,
                    "min_booking_amount": min_booking_amount,
                    "total_qty": total_qty,
                    "remaining_qty": total_qty,
                    "per_customer_limit": per_customer_limit,
                    "start_date": start,
                    "end_date": end,
                },
            )
            if created:
                created_count += 1
                self.stdout.write(f"created: {code}")
            else:
                self.stdout.write(f"exists:  {code}")

        self.stdout.write(
            self.style.SUCCESS(f"Promotions seeded ({created_count} new).")
        )
