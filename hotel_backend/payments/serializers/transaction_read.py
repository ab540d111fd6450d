# payments/serializers/transaction_read.py

from rest_framework import serializers

from payments.models import Transaction, TransactionDetail
from promotions.models import UsedPromotion


class UsedPromotionSerializer(serializers.ModelSerializer):
    promotion_code = serializers.CharField(source="promotion.code", read_only=True)

    class Meta:
        model = UsedPromotion
        fields = [
            "id",
            "promotion",
            "promotion_code",
            "customer_promotion",
            "discount_amount",
            "transaction_detail",
            "created_at",
        ]
        read_only_fields = fields


class TransactionDetailSerializer(serializers.ModelSerializer):
    """
    One allocation line (read-only).
    """

    target_type = serializers.CharField(read_only=True)
    used_promotions = UsedPromotionSerializer(many=True, read_only=True)

    class Meta:
        model = TransactionDetail
        fields = [
            "id",
            "transaction",
            "target_type",
            "booking_room",
            "service_usage",
            "base_amount",
            "discount_amount",
            "amount",
            "used_promotions",
            "created_at",
        ]
        read_only_fields = fields


class TransactionSerializer(serializers.ModelSerializer):
    """
    CANONICAL TRANSACTION SERIALIZER (read-only)
    """

    details = TransactionDetailSerializer(many=True, read_only=True)
    processed_by_username = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "booking",
            "type",
            "method",
            "status",
            "base_amount",
            "discount_amount",
            "amount",
            "transaction_ref",
            "description",
            "processed_by",
            "processed_by_username",
            "occurred_at",
            "created_at",
            "details",
        ]
        read_only_fields = fields

    def get_processed_by_username(self, obj):
        user = getattr(obj, "processed_by", None)
        return getattr(user, "username", None)
