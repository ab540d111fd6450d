# payments/services/discount_allocation.py

"""
DISCOUNT ALLOCATION

Attaches validated promotion discounts to the charge lines of one payment.

RULES:
- Line-level applications (room / service target):
    discount measured on that line's base, summed with other discounts on
    the same line and capped so the line discount never exceeds its base.
    A target that is not a line of this payment gets 0.
- Transaction-level applications:
    discount measured on Σ line bases, capped at the base left after
    line-level discounts, then spread over the lines in line order
    (waterfall) so every detail stays consistent with the transaction.
- Application order decides which discount a cap trims.
- The capped value is the value recorded everywhere (details, transaction,
  UsedPromotion).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from promotions.services.discount_calculator import calculate_discount, resolve_base_amount
from promotions.services.promotion_validator import ValidatedApplication

ZERO = Decimal("0.00")


@dataclass
class AppliedDiscount:
    validated: ValidatedApplication
    amount: Decimal
    # Line the UsedPromotion attaches to (None: target not in this payment)
    line: Optional[object] = None

    @property
    def is_transaction_level(self) -> bool:
        return self.validated.application.is_transaction_level


def _find_line(application, lines):
    for line in lines:
        if application.booking_room_id and line.booking_room_id is not None:
            if str(line.booking_room_id) == str(application.booking_room_id):
                return line
        if application.service_usage_id and line.service_usage_id is not None:
            if str(line.service_usage_id) == str(application.service_usage_id):
                return line
    return None


def allocate_discounts(lines: list, validated: list[ValidatedApplication]) -> list[AppliedDiscount]:
    applied: list[AppliedDiscount] = []

    # ----------------------------
    # 1) Line-level discounts
    # ----------------------------
    for item in validated:
        application = item.application
        if application.is_transaction_level:
            continue

        line = _find_line(application, lines)
        if line is None:
            applied.append(AppliedDiscount(validated=item, amount=ZERO))
            continue

        raw = calculate_discount(item.promotion, resolve_base_amount(application, lines))
        granted = min(raw, line.amount)
        line.targeted_discount += granted

        applied.append(AppliedDiscount(validated=item, amount=granted, line=line))

    # ----------------------------
    # 2) Transaction-level discounts
    # ----------------------------
    remaining = sum((line.amount for line in lines), ZERO)
    shared_total = ZERO

    for item in validated:
        application = item.application
        if not application.is_transaction_level:
            continue

        raw = calculate_discount(item.promotion, resolve_base_amount(application, lines))
        granted = min(raw, remaining)
        remaining -= granted
        shared_total += granted

        applied.append(
            AppliedDiscount(
                validated=item,
                amount=granted,
                line=lines[0] if lines else None,
            )
        )

    # ----------------------------
    # 3) Spread shared discount (waterfall)
    # ----------------------------
    to_spread = shared_total
    for line in lines:
        if to_spread <= ZERO:
            break
        take = min(to_spread, line.amount)
        line.shared_discount += take
        to_spread -= take

    # Keep request order for persistence
    order = {id(item): index for index, item in enumerate(validated)}
    applied.sort(key=lambda a: order[id(a.validated)])

    return applied
