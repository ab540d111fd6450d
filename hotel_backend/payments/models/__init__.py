# payments/models/__init__.py

from .transaction import Transaction
from .transaction_detail import TransactionDetail

__all__ = [
    "Transaction",
    "TransactionDetail",
]
