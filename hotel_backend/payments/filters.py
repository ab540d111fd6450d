# payments/filters.py

import django_filters

from payments.models import Transaction, TransactionDetail


class TransactionFilter(django_filters.FilterSet):
    booking = django_filters.UUIDFilter(field_name="booking_id")
    type = django_filters.ChoiceFilter(choices=Transaction.TYPE_CHOICES)
    method = django_filters.ChoiceFilter(choices=Transaction.METHOD_CHOICES)
    status = django_filters.ChoiceFilter(choices=Transaction.STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name="occurred_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="occurred_at", lookup_expr="date__lte")
    min_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="gte")
    max_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="lte")

    class Meta:
        model = Transaction
        fields = ["booking", "type", "method", "status"]


class TransactionDetailFilter(django_filters.FilterSet):
    transaction = django_filters.UUIDFilter(field_name="transaction_id")
    booking_room = django_filters.UUIDFilter(field_name="booking_room_id")
    service_usage = django_filters.UUIDFilter(field_name="service_usage_id")
    min_base_amount = django_filters.NumberFilter(field_name="base_amount", lookup_expr="gte")
    max_base_amount = django_filters.NumberFilter(field_name="base_amount", lookup_expr="lte")
    min_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="gte")
    max_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="lte")
    guest_only = django_filters.BooleanFilter(field_name="transaction", lookup_expr="isnull")

    class Meta:
        model = TransactionDetail
        fields = ["transaction", "booking_room", "service_usage"]
