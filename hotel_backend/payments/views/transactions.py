# payments/views/transactions.py

"""
TRANSACTION QUERIES (STAFF, READ-ONLY)

    GET /api/payments/transactions/          list + filters
    GET /api/payments/transactions/<id>/     one transaction, details, promotions
    GET /api/payments/details/               allocation lines + filters
"""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from payments.filters import TransactionDetailFilter, TransactionFilter
from payments.models import Transaction, TransactionDetail
from payments.serializers.transaction_read import (
    TransactionDetailSerializer,
    TransactionSerializer,
)
from permissions.roles import CAP_PAYMENTS_VIEW, HasCapability


class TransactionViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = (
        Transaction.objects
        .select_related("booking", "processed_by")
        .prefetch_related("details", "details__used_promotions__promotion")
    )
    serializer_class = TransactionSerializer
    filterset_class = TransactionFilter
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENTS_VIEW


class TransactionDetailViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = (
        TransactionDetail.objects
        .select_related("transaction", "booking_room", "service_usage")
        .prefetch_related("used_promotions__promotion")
    )
    serializer_class = TransactionDetailSerializer
    filterset_class = TransactionDetailFilter
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENTS_VIEW
