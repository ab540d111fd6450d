# payments/views/payment.py

from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.exceptions import DomainError, domain_error_response
from bookings.serializers import BookingSerializer
from payments.serializers.payment_command import PaymentCommandSerializer
from payments.serializers.transaction_read import (
    TransactionDetailSerializer,
    TransactionSerializer,
)
from payments.services.payment_orchestrator import create_payment
from permissions.roles import CAP_PAYMENTS_COLLECT, HasCapability


class PaymentResultSerializer(serializers.Serializer):
    transaction = TransactionSerializer(allow_null=True)
    details = TransactionDetailSerializer(many=True)
    booking = BookingSerializer(allow_null=True)


class PaymentView(APIView):
    """
    PAYMENT ENDPOINT (AUTHORITATIVE)

    GUARANTEES:
    - Atomic: every balance, detail and promotion change or none
    - Amount is computed from outstanding balances (never client-supplied)
    - Guest-service payments return a detail without a transaction
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENTS_COLLECT

    @extend_schema(
        request=PaymentCommandSerializer,
        responses={201: PaymentResultSerializer},
        description="Allocate a payment across a booking, selected rooms or a single service usage",
    )
    def post(self, request):
        serializer = PaymentCommandSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = create_payment(
                booking_id=data.get("booking_id"),
                booking_room_ids=data.get("booking_room_ids") or [],
                service_usage_id=data.get("service_usage_id"),
                payment_method=data["payment_method"],
                transaction_type=data["transaction_type"],
                transaction_ref=data.get("transaction_ref", ""),
                description=data.get("description", ""),
                promotion_applications=data.get("promotion_applications") or [],
                employee=request.user,
            )
        except DomainError as exc:
            return domain_error_response(exc)

        payload = {
            "transaction": TransactionSerializer(result.transaction).data
            if result.transaction is not None
            else None,
            "details": TransactionDetailSerializer(result.details, many=True).data,
            "booking": BookingSerializer(result.booking).data
            if result.booking is not None
            else None,
        }
        return Response(payload, status=status.HTTP_201_CREATED)
