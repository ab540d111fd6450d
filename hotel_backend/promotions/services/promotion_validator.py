# promotions/services/promotion_validator.py

"""
PROMOTION VALIDATOR

Checks every promotion application of a payment BEFORE any write.

Per application:
1) target type: room (booking_room_id) | service (service_usage_id) | transaction
2) CustomerPromotion must exist                      -> NotFoundError
3) status must be AVAILABLE                          -> BadRequestError
4) promotion not disabled, inside its date window    -> BadRequestError
5) scope matches target (ROOM/room, SERVICE/service, ALL/any)

All-or-nothing: the first failure aborts the payment.
Rows are locked (select_for_update); call inside the payment's atomic block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

from backend.exceptions import BadRequestError, NotFoundError
from promotions.models import CustomerPromotion, Promotion

TARGET_ROOM = "room"
TARGET_SERVICE = "service"
TARGET_TRANSACTION = "transaction"


@dataclass(frozen=True)
class PromotionApplication:
    customer_promotion_id: str
    booking_room_id: Optional[str] = None
    service_usage_id: Optional[str] = None

    @property
    def target_type(self) -> str:
        if self.booking_room_id:
            return TARGET_ROOM
        if self.service_usage_id:
            return TARGET_SERVICE
        return TARGET_TRANSACTION

    @property
    def is_transaction_level(self) -> bool:
        return self.target_type == TARGET_TRANSACTION


@dataclass(frozen=True)
class ValidatedApplication:
    application: PromotionApplication
    customer_promotion: CustomerPromotion

    @property
    def promotion(self) -> Promotion:
        return self.customer_promotion.promotion


# ============================================================
# SINGLE-APPLICATION RULES
# ============================================================


def check_promotion_active(promotion: Promotion, *, now=None):
    now = now or timezone.now()

    if promotion.is_disabled(now):
        raise BadRequestError("Promotion has been disabled")

    if not promotion.is_within_window(now):
        raise BadRequestError("Promotion is not valid at this time")


def check_scope(promotion: Promotion, *, target_type: str):
    if promotion.scope == Promotion.SCOPE_ROOM and target_type != TARGET_ROOM:
        raise BadRequestError("This promotion can only be applied to room charges")

    if promotion.scope == Promotion.SCOPE_SERVICE and target_type != TARGET_SERVICE:
        raise BadRequestError("This promotion can only be applied to service charges")


def validate_application(
    customer_promotion: CustomerPromotion,
    application: PromotionApplication,
    *,
    now=None,
):
    if customer_promotion.status != CustomerPromotion.STATUS_AVAILABLE:
        raise BadRequestError(f"Promotion is {customer_promotion.status.lower()}")

    promotion = customer_promotion.promotion
    check_promotion_active(promotion, now=now)
    check_scope(promotion, target_type=application.target_type)


# ============================================================
# BATCH (PAYMENT) VALIDATION
# ============================================================


def validate_promotion_applications(
    applications: list[PromotionApplication],
    *,
    now=None,
) -> list[ValidatedApplication]:
    if not applications:
        return []

    ids = [str(a.customer_promotion_id) for a in applications]
    if len(set(ids)) != len(ids):
        raise BadRequestError("The same customer promotion cannot be applied twice")

    locked = {
        str(cp.id): cp
        for cp in (
            CustomerPromotion.objects
            .select_for_update()
            .select_related("promotion")
            .filter(id__in=ids)
        )
    }

    now = now or timezone.now()
    validated: list[ValidatedApplication] = []

    # Request order is preserved; it decides which discount a cap trims.
    for application in applications:
        customer_promotion = locked.get(str(application.customer_promotion_id))
        if customer_promotion is None:
            raise NotFoundError("Customer promotion not found")

        validate_application(customer_promotion, application, now=now)
        validated.append(
            ValidatedApplication(
                application=application,
                customer_promotion=customer_promotion,
            )
        )

    return validated
