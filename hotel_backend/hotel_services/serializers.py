# hotel_services/serializers.py

from rest_framework import serializers

from hotel_services.models import Service, ServiceUsage


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id", "name", "unit", "price", "is_active"]
        read_only_fields = fields


class ServiceUsageSerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source="service.name", read_only=True)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = ServiceUsage
        fields = [
            "id",
            "booking",
            "booking_room",
            "customer",
            "service",
            "service_name",
            "quantity",
            "unit_price",
            "total_price",
            "total_paid",
            "balance",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ServiceUsageCreateSerializer(serializers.Serializer):
    """
    Guest usage: no booking, no room.
    Booking-level usage: booking only.
    Room usage: booking_room (booking is derived when omitted).
    """

    service_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    booking_id = serializers.UUIDField(required=False, allow_null=True)
    booking_room_id = serializers.UUIDField(required=False, allow_null=True)
    customer_id = serializers.UUIDField(required=False, allow_null=True)


class ServiceUsageUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=ServiceUsage.STATUS_CHOICES, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide quantity and/or status")
        return attrs
