# promotions/services/promotion_service.py

"""
PROMOTION SERVICE (AUTHORITATIVE)

Responsibilities:
- create / update promotions (staff)
- claim a promotion for a customer
- expire claimed promotions whose window has ended
- active-promotion and claimed-promotion listings

Claim and expiry are independent short atomic operations; they never touch
room or service balances.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from activity.models import Activity
from activity.services.activity_service import record_activity
from backend.exceptions import BadRequestError, NotFoundError
from bookings.models import Customer
from promotions.models import CustomerPromotion, Promotion
from promotions.services.promotion_validator import check_promotion_active

logger = logging.getLogger("promotions")

TWOPLACES = Decimal("0.01")

# Fields staff may change after creation.
UPDATABLE_FIELDS = {
    "code",
    "description",
    "value",
    "max_discount",
    "min_booking_amount",
    "start_date",
    "end_date",
    "total_qty",
    "remaining_qty",
    "per_customer_limit",
    "disabled_at",
}

MONEY_FIELDS = {"value", "max_discount", "min_booking_amount"}


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _check_terms(*, type: str, value, start_date, end_date):
    if start_date >= end_date:
        raise BadRequestError("Start date must be before end date")

    value = _money(value)
    if value <= 0:
        raise BadRequestError("Promotion value must be greater than zero")

    if type == Promotion.TYPE_PERCENTAGE and value > Decimal("100"):
        raise BadRequestError("Percentage promotions cannot exceed 100")


# ============================================================
# CREATE / UPDATE
# ============================================================


@transaction.atomic
def create_promotion(
    *,
    code: str,
    type: str,
    value,
    start_date,
    end_date,
    scope: str = Promotion.SCOPE_ALL,
    description: str = "",
    max_discount=None,
    min_booking_amount=Decimal("0.00"),
    total_qty: int | None = None,
    per_customer_limit: int = 1,
    employee=None,
) -> Promotion:
    code = (code or "").strip()
    if not code:
        raise BadRequestError("Promotion code is required")

    _check_terms(type=type, value=value, start_date=start_date, end_date=end_date)

    if Promotion.objects.filter(code=code).exists():
        raise BadRequestError(f'Promotion code "{code}" already exists')

    promotion = Promotion.objects.create(
        code=code,
        description=description or "",
        type=type,
        scope=scope or Promotion.SCOPE_ALL,
        value=_money(value),
        max_discount=_money(max_discount) if max_discount is not None else None,
        min_booking_amount=_money(min_booking_amount),
        start_date=start_date,
        end_date=end_date,
        total_qty=total_qty,
        remaining_qty=total_qty,
        per_customer_limit=per_customer_limit or 1,
        disabled_at=None,
    )

    shown_value = f"{promotion.value}%" if type == Promotion.TYPE_PERCENTAGE else str(promotion.value)
    record_activity(
        type=Activity.TYPE_CREATE_PROMOTION,
        description=f"Promotion created: {code} ({shown_value})",
        metadata={
            "promotion_id": promotion.id,
            "code": code,
            "type": type,
            "scope": promotion.scope,
            "value": promotion.value,
        },
        employee=employee,
    )

    logger.info("Promotion created", extra={"promotion_code": code})
    return promotion


@transaction.atomic
def update_promotion(*, promotion_id, changes: dict, employee=None) -> Promotion:
    try:
        promotion = Promotion.objects.select_for_update().get(pk=promotion_id)
    except Promotion.DoesNotExist as exc:
        raise NotFoundError("Promotion not found") from exc

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise BadRequestError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    changes = dict(changes)

    if "code" in changes:
        changes["code"] = (changes["code"] or "").strip()
        if not changes["code"]:
            raise BadRequestError("Promotion code is required")

    new_code = changes.get("code")
    if new_code and new_code != promotion.code:
        if Promotion.objects.filter(code=new_code).exclude(pk=promotion.pk).exists():
            raise BadRequestError(f'Promotion code "{new_code}" already exists')

    # Claims already taken off the old quantity stay taken
    if "total_qty" in changes and "remaining_qty" not in changes:
        new_total = changes["total_qty"]
        if new_total is None:
            changes["remaining_qty"] = None
        elif promotion.total_qty is None:
            changes["remaining_qty"] = new_total
        else:
            claimed = promotion.total_qty - (promotion.remaining_qty or 0)
            changes["remaining_qty"] = max(new_total - claimed, 0)

    for field, value in changes.items():
        if field in MONEY_FIELDS and value is not None:
            value = _money(value)
        setattr(promotion, field, value)

    _check_terms(
        type=promotion.type,
        value=promotion.value,
        start_date=promotion.start_date,
        end_date=promotion.end_date,
    )

    promotion.save()

    record_activity(
        type=Activity.TYPE_UPDATE_PROMOTION,
        description=f"Promotion updated: {promotion.code}",
        metadata={
            "promotion_id": promotion.id,
            "changes": {k: (str(v) if v is not None else None) for k, v in changes.items()},
        },
        employee=employee,
    )

    return promotion


# ============================================================
# CLAIM
# ============================================================


@transaction.atomic
def claim_promotion(*, customer_id, code: str, now=None) -> CustomerPromotion:
    """
    Promotion row is locked so concurrent claims serialize on remaining_qty
    and on the per-customer count.
    """
    try:
        customer = Customer.objects.get(pk=customer_id)
    except Customer.DoesNotExist as exc:
        raise NotFoundError("Customer not found") from exc

    try:
        promotion = Promotion.objects.select_for_update().get(code=(code or "").strip())
    except Promotion.DoesNotExist as exc:
        raise NotFoundError("Promotion not found") from exc

    now = now or timezone.now()
    check_promotion_active(promotion, now=now)

    if promotion.remaining_qty is not None and promotion.remaining_qty <= 0:
        raise BadRequestError("Promotion is no longer available")

    claimed = CustomerPromotion.objects.filter(
        customer=customer,
        promotion=promotion,
    ).count()

    if claimed >= promotion.per_customer_limit:
        raise BadRequestError(
            f"You have already claimed this promotion {promotion.per_customer_limit} time(s)"
        )

    customer_promotion = CustomerPromotion.objects.create(
        customer=customer,
        promotion=promotion,
        status=CustomerPromotion.STATUS_AVAILABLE,
        claimed_at=now,
    )

    if promotion.remaining_qty is not None:
        promotion.remaining_qty -= 1
        promotion.save(update_fields=["remaining_qty", "updated_at"])

    record_activity(
        type=Activity.TYPE_CLAIM_PROMOTION,
        description=f"Customer claimed promotion: {promotion.code}",
        metadata={
            "promotion_id": promotion.id,
            "promotion_code": promotion.code,
            "customer_promotion_id": customer_promotion.id,
        },
        customer=customer,
    )

    logger.info(
        "Promotion claimed",
        extra={"promotion_code": promotion.code, "customer_id": str(customer.id)},
    )

    return customer_promotion


# ============================================================
# EXPIRE
# ============================================================


@transaction.atomic
def expire_promotions(*, now=None) -> int:
    """
    AVAILABLE claims whose promotion ended -> EXPIRED.
    Returns the number of rows expired.
    """
    now = now or timezone.now()

    count = CustomerPromotion.objects.filter(
        status=CustomerPromotion.STATUS_AVAILABLE,
        promotion__end_date__lt=now,
    ).update(status=CustomerPromotion.STATUS_EXPIRED)

    if count:
        logger.info("Customer promotions expired", extra={"count": count})

    return count


# ============================================================
# LISTINGS
# ============================================================


def active_promotions(*, now=None):
    """
    Not disabled, inside the window, stock left (or unlimited).
    """
    now = now or timezone.now()
    return (
        Promotion.objects
        .filter(start_date__lte=now, end_date__gte=now)
        .filter(Q(disabled_at__isnull=True) | Q(disabled_at__gt=now))
        .filter(Q(remaining_qty__isnull=True) | Q(remaining_qty__gt=0))
        .order_by("-created_at")
    )


def available_customer_promotions(*, customer_id, now=None):
    now = now or timezone.now()
    return (
        CustomerPromotion.objects
        .select_related("promotion")
        .filter(
            customer_id=customer_id,
            status=CustomerPromotion.STATUS_AVAILABLE,
            promotion__start_date__lte=now,
            promotion__end_date__gte=now,
        )
        .filter(Q(promotion__disabled_at__isnull=True) | Q(promotion__disabled_at__gt=now))
        .order_by("-claimed_at")
    )
