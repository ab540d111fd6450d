# promotions/serializers.py

from rest_framework import serializers

from promotions.models import CustomerPromotion, Promotion


class PromotionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Promotion
        fields = [
            "id",
            "code",
            "description",
            "type",
            "scope",
            "value",
            "max_discount",
            "min_booking_amount",
            "total_qty",
            "remaining_qty",
            "per_customer_limit",
            "start_date",
            "end_date",
            "disabled_at",
            "created_at",
        ]
        read_only_fields = fields


class PromotionCreateSerializer(serializers.Serializer):
    """
    Command serializer: shape only, business rules live in promotion_service.
    """

    code = serializers.CharField(max_length=50)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    type = serializers.ChoiceField(choices=Promotion.TYPE_CHOICES)
    scope = serializers.ChoiceField(choices=Promotion.SCOPE_CHOICES, default=Promotion.SCOPE_ALL)
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    max_discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    min_booking_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default="0.00"
    )
    total_qty = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)
    per_customer_limit = serializers.IntegerField(min_value=1, required=False, default=1)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()


class PromotionUpdateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    value = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    max_discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    min_booking_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    total_qty = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    remaining_qty = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    per_customer_limit = serializers.IntegerField(min_value=1, required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    disabled_at = serializers.DateTimeField(required=False, allow_null=True)


class PromotionClaimSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    code = serializers.CharField(max_length=50)


class CustomerPromotionSerializer(serializers.ModelSerializer):
    promotion = PromotionSerializer(read_only=True)

    class Meta:
        model = CustomerPromotion
        fields = [
            "id",
            "customer",
            "promotion",
            "status",
            "claimed_at",
            "used_at",
            "transaction_detail",
        ]
        read_only_fields = fields
