# payments/urls.py

"""
PAYMENTS API URLS

    POST /api/payments/                      create a payment
    GET  /api/payments/transactions/         transactions (filterable)
    GET  /api/payments/transactions/<uuid>/
    GET  /api/payments/details/              transaction details (filterable)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from payments.views.payment import PaymentView
from payments.views.transactions import TransactionDetailViewSet, TransactionViewSet

router = SimpleRouter()
router.register(r"transactions", TransactionViewSet, basename="transactions")
router.register(r"details", TransactionDetailViewSet, basename="transaction-details")

urlpatterns = [
    path("", PaymentView.as_view(), name="payments-create"),
    path("", include(router.urls)),
]
