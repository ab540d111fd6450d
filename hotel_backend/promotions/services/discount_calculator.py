# promotions/services/discount_calculator.py

"""
DISCOUNT CALCULATOR (PURE)

- calculate_discount: what a promotion takes off a given base amount
- resolve_base_amount: which base amount an application is measured against

No database access. All money is Decimal, quantized to 0.01 (ROUND_HALF_UP,
i.e. half away from zero for the non-negative amounts handled here).
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from promotions.models import Promotion

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def calculate_discount(promotion: Promotion, base_amount) -> Decimal:
    base = _money(base_amount)

    if base <= ZERO:
        return ZERO

    # Minimum spend not met: no discount (not an error)
    if base < _money(promotion.min_booking_amount):
        return ZERO

    if promotion.type == Promotion.TYPE_PERCENTAGE:
        discount = _money(base * Decimal(promotion.value) / Decimal("100"))
        if promotion.max_discount is not None:
            discount = min(discount, _money(promotion.max_discount))
    else:
        discount = min(_money(promotion.value), base)

    return max(discount, ZERO)


def resolve_base_amount(application, lines: Iterable) -> Decimal:
    """
    - room-targeted    -> base of that room's line
    - service-targeted -> base of that service's line
    - transaction-level -> sum of all line bases

    A target with no line in this payment resolves to 0.
    """
    lines = list(lines)

    if application.booking_room_id:
        for line in lines:
            if line.booking_room_id and str(line.booking_room_id) == str(application.booking_room_id):
                return _money(line.base_amount)
        return ZERO

    if application.service_usage_id:
        for line in lines:
            if line.service_usage_id and str(line.service_usage_id) == str(application.service_usage_id):
                return _money(line.base_amount)
        return ZERO

    return sum((_money(line.base_amount) for line in lines), ZERO)
