# bookings/serializers.py

from rest_framework import serializers

from bookings.models import Booking, BookingRoom


class BookingRoomSerializer(serializers.ModelSerializer):
    class Meta:
        model = BookingRoom
        fields = [
            "id",
            "room_number",
            "price_per_night",
            "nights",
            "subtotal_room",
            "total_amount",
            "total_paid",
            "balance",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """
    Booking snapshot (read-only): totals plus every room's balance.
    """

    customer_name = serializers.CharField(source="customer.full_name", read_only=True)
    booking_rooms = BookingRoomSerializer(many=True, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_code",
            "status",
            "customer",
            "customer_name",
            "total_amount",
            "total_paid",
            "balance",
            "check_in",
            "check_out",
            "created_at",
            "booking_rooms",
        ]
        read_only_fields = fields
