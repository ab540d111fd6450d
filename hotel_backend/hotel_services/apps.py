# hotel_services/apps.py

from django.apps import AppConfig


class HotelServicesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hotel_services"
    verbose_name = "Hotel Services"
