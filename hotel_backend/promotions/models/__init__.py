# promotions/models/__init__.py

from .customer_promotion import CustomerPromotion
from .promotion import Promotion
from .used_promotion import UsedPromotion

__all__ = [
    "CustomerPromotion",
    "Promotion",
    "UsedPromotion",
]
