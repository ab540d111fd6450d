# payments/services/payment_orchestrator.py

"""
======================================================
PATH: payments/services/payment_orchestrator.py
======================================================
PAYMENT ORCHESTRATOR (ATOMIC, AUTHORITATIVE)

Public entry point for every payment:

    create_payment(...) -> PaymentResult(transaction, details, booking)

FLOW (one transaction.atomic unit of work):
1) Classify the request (router) - no amount is ever accepted
2) Lock + validate promotion applications (before any write)
3) Lock targets and build charge lines
4) Compute discounts, aggregate amounts
5) Create Transaction (not for guest-service payments)
6) Create TransactionDetails, apply them through the ledger
7) Record UsedPromotions, mark claims USED
8) DEPOSIT: confirm booking and touched rooms still PENDING
9) Record one activity event

Any failure rolls back everything. A lock failure surfaces as ConflictError
after rollback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from django.db import OperationalError, transaction
from django.utils import timezone

from activity.services.activity_service import record_payment_activity
from backend.exceptions import BadRequestError, ConflictError
from bookings.models import Booking
from bookings.services.booking_lifecycle import confirm_if_pending
from payments.models import Transaction, TransactionDetail
from payments.services.amount_aggregator import aggregate_amounts
from payments.services.charge_lines import ChargePlan, build_charge_plan
from payments.services.discount_allocation import allocate_discounts
from payments.services.ledger import apply_allocation
from payments.services.scenarios import PaymentRequest, build_request, classify_payment
from promotions.models import UsedPromotion
from promotions.services.promotion_lifecycle import mark_used
from promotions.services.promotion_validator import validate_promotion_applications

logger = logging.getLogger("payments")

ZERO = Decimal("0.00")

VALID_METHODS = {choice for choice, _ in Transaction.METHOD_CHOICES}
VALID_TYPES = {choice for choice, _ in Transaction.TYPE_CHOICES}

DEFAULT_DESCRIPTIONS = {
    Transaction.TYPE_DEPOSIT: "Deposit for booking {code}",
    Transaction.TYPE_ROOM_CHARGE: "Room charge for booking {code}",
    Transaction.TYPE_SERVICE_CHARGE: "Service charge for booking {code}",
    Transaction.TYPE_REFUND: "Refund for booking {code}",
    Transaction.TYPE_ADJUSTMENT: "Adjustment for booking {code}",
}


@dataclass(frozen=True)
class PaymentResult:
    transaction: Optional[Transaction]
    details: list = field(default_factory=list)
    booking: Optional[Booking] = None


def default_description(transaction_type: str, booking_code: str) -> str:
    template = DEFAULT_DESCRIPTIONS.get(transaction_type, "Transaction for booking {code}")
    return template.format(code=booking_code)


# ======================================================
# PUBLIC ENTRY POINT
# ======================================================


def create_payment(
    *,
    payment_method: str,
    transaction_type: str,
    booking_id=None,
    booking_room_ids=None,
    service_usage_id=None,
    promotion_applications=None,
    transaction_ref: str = "",
    description: str = "",
    employee=None,
) -> PaymentResult:
    request = build_request(
        payment_method=payment_method,
        transaction_type=transaction_type,
        booking_id=booking_id,
        booking_room_ids=booking_room_ids,
        service_usage_id=service_usage_id,
        transaction_ref=transaction_ref,
        description=description,
        employee=employee,
        promotion_applications=promotion_applications,
    )

    if request.payment_method not in VALID_METHODS:
        raise BadRequestError(f"Invalid payment method: {request.payment_method}")
    if request.transaction_type not in VALID_TYPES:
        raise BadRequestError(f"Invalid transaction type: {request.transaction_type}")

    try:
        return _process_payment(request)
    except OperationalError as exc:
        # The atomic block has already rolled back at this point
        logger.warning(
            "Payment aborted by a concurrent writer",
            extra={"booking_id": str(request.booking_id or ""), "error": str(exc)},
        )
        raise ConflictError(
            "The payment conflicted with a concurrent update; nothing was recorded"
        ) from exc


# ======================================================
# UNIT OF WORK
# ======================================================


@transaction.atomic
def _process_payment(request: PaymentRequest) -> PaymentResult:
    # --------------------------------------------------
    # 1) Route
    # --------------------------------------------------
    scenario = classify_payment(request)

    # --------------------------------------------------
    # 2) Promotions (validated before any write)
    # --------------------------------------------------
    validated = validate_promotion_applications(list(request.promotion_applications))

    # --------------------------------------------------
    # 3) Charge lines
    # --------------------------------------------------
    plan: ChargePlan = build_charge_plan(scenario)

    if not plan.lines:
        raise BadRequestError("Nothing to charge")

    # --------------------------------------------------
    # 4) Discounts + totals
    # --------------------------------------------------
    applied = allocate_discounts(plan.lines, validated)
    totals = aggregate_amounts(
        plan.lines,
        [a.amount for a in applied if a.is_transaction_level],
    )

    now = timezone.now()

    # --------------------------------------------------
    # 5) Transaction header
    # --------------------------------------------------
    txn = None
    if not plan.is_guest:
        txn = Transaction.objects.create(
            booking=plan.booking,
            type=request.transaction_type,
            method=request.payment_method,
            status=Transaction.STATUS_COMPLETED,
            base_amount=totals.base_amount,
            discount_amount=totals.discount_amount,
            amount=totals.amount,
            transaction_ref=request.transaction_ref,
            description=request.description
            or default_description(request.transaction_type, plan.booking.booking_code),
            processed_by=request.employee
            if getattr(request.employee, "is_authenticated", False)
            else None,
            occurred_at=now,
        )

    # --------------------------------------------------
    # 6) Details + ledger
    # --------------------------------------------------
    entries = []
    detail_for_line = {}
    for line in plan.lines:
        detail = TransactionDetail.objects.create(
            transaction=txn,
            booking_room=line.booking_room,
            service_usage=line.service_usage,
            base_amount=line.base_amount,
            discount_amount=line.discount_amount,
            amount=line.amount,
        )
        entries.append((line, detail))
        detail_for_line[id(line)] = detail

    booking = apply_allocation(
        booking=plan.booking,
        entries=entries,
        employee=request.employee,
    )

    details = [detail for _, detail in entries]

    # --------------------------------------------------
    # 7) Promotions used
    # --------------------------------------------------
    for item in applied:
        if item.amount <= ZERO or item.line is None:
            continue

        detail = detail_for_line[id(item.line)]
        UsedPromotion.objects.create(
            promotion=item.validated.promotion,
            customer_promotion=item.validated.customer_promotion,
            discount_amount=item.amount,
            transaction_detail=detail,
            transaction=txn,
        )
        mark_used(
            customer_promotion=item.validated.customer_promotion,
            transaction_detail=detail,
            now=now,
        )

    # --------------------------------------------------
    # 8) Deposit confirms booking + touched rooms
    # --------------------------------------------------
    if booking is not None and request.transaction_type == Transaction.TYPE_DEPOSIT:
        if confirm_if_pending(booking):
            booking.save(update_fields=["status"])

        for room in plan.touched_rooms():
            if confirm_if_pending(room):
                room.save(update_fields=["status"])

    # --------------------------------------------------
    # 9) Activity (never aborts the payment)
    # --------------------------------------------------
    service_usage = plan.lines[0].service_usage if plan.is_guest else None
    record_payment_activity(
        transaction_obj=txn,
        details=details,
        employee=request.employee,
        booking=booking,
        service_usage=service_usage,
    )

    logger.info(
        "Payment recorded",
        extra={
            "scenario": type(scenario).__name__,
            "transaction_id": str(txn.id) if txn else None,
            "amount": str(totals.amount),
            "discount": str(totals.discount_amount),
        },
    )

    return PaymentResult(transaction=txn, details=details, booking=booking)
