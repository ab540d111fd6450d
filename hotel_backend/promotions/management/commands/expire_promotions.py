# promotions/management/commands/expire_promotions.py

from django.core.management.base import BaseCommand

from promotions.services.promotion_service import expire_promotions


class Command(BaseCommand):
    help = "Expire AVAILABLE customer promotions whose promotion has ended"

    def handle(self, *args, **options):
        count = expire_promotions()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} customer promotion(s)."))
