# payments/serializers/payment_command.py

from rest_framework import serializers

from payments.models import Transaction


class PromotionApplicationInputSerializer(serializers.Serializer):
    customer_promotion_id = serializers.UUIDField()
    booking_room_id = serializers.UUIDField(required=False, allow_null=True)
    service_usage_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get("booking_room_id") and attrs.get("service_usage_id"):
            raise serializers.ValidationError(
                "A promotion targets a room OR a service, not both."
            )
        return attrs


class PaymentCommandSerializer(serializers.Serializer):
    """
    Command serializer for payment requests.

    Validates shape only (no database access).
    There is deliberately NO amount field: the engine derives it.
    """

    booking_id = serializers.UUIDField(required=False, allow_null=True)
    booking_room_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=True,
        default=list,
    )
    service_usage_id = serializers.UUIDField(required=False, allow_null=True)

    payment_method = serializers.ChoiceField(choices=Transaction.METHOD_CHOICES)
    transaction_type = serializers.ChoiceField(choices=Transaction.TYPE_CHOICES)

    transaction_ref = serializers.CharField(
        required=False, allow_blank=True, max_length=100, default=""
    )
    description = serializers.CharField(required=False, allow_blank=True, default="")

    promotion_applications = PromotionApplicationInputSerializer(
        many=True,
        required=False,
        default=list,
    )
