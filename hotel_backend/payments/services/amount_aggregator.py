# payments/services/amount_aggregator.py

"""
AMOUNT AGGREGATOR (PURE)

    base_amount     = Σ line.base_amount
    discount_amount = Σ line targeted discounts + Σ transaction-level discounts
    amount          = base_amount - discount_amount

A discount is line-level iff its application names a room or a service;
otherwise it is transaction-level. Each is counted once.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class AggregatedAmounts:
    base_amount: Decimal
    discount_amount: Decimal
    amount: Decimal


def aggregate_amounts(lines: Iterable, transaction_level_discounts: Iterable) -> AggregatedAmounts:
    lines = list(lines)

    base_amount = sum((Decimal(line.base_amount) for line in lines), ZERO)
    line_discounts = sum((Decimal(line.targeted_discount) for line in lines), ZERO)
    shared = sum((Decimal(d) for d in transaction_level_discounts), ZERO)

    discount_amount = line_discounts + shared

    return AggregatedAmounts(
        base_amount=base_amount,
        discount_amount=discount_amount,
        amount=base_amount - discount_amount,
    )
