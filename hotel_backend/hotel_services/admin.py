# hotel_services/admin.py

from django.contrib import admin

from hotel_services.models import Service, ServiceUsage


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "unit", "price", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(ServiceUsage)
class ServiceUsageAdmin(admin.ModelAdmin):
    list_display = (
        "service",
        "booking",
        "booking_room",
        "quantity",
        "total_price",
        "total_paid",
        "status",
        "created_at",
    )
    list_filter = ("status",)
    raw_id_fields = ("booking", "booking_room", "customer", "service", "employee")
    # Balances move through the payment engine only
    readonly_fields = ("unit_price", "total_price", "total_paid")
