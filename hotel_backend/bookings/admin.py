# bookings/admin.py

from django.contrib import admin

from bookings.models import Booking, BookingRoom, Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("full_name", "phone", "email", "created_at")
    search_fields = ("full_name", "phone", "email")


class BookingRoomInline(admin.TabularInline):
    model = BookingRoom
    extra = 0
    readonly_fields = ("subtotal_room", "total_paid", "balance")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_code",
        "customer",
        "status",
        "total_amount",
        "total_paid",
        "balance",
        "created_at",
    )
    # Totals are derived by the payment engine
    readonly_fields = ("booking_code", "total_paid", "balance", "created_at")
    search_fields = ("booking_code", "customer__full_name")
    list_filter = ("status", "created_at")
    inlines = [BookingRoomInline]
