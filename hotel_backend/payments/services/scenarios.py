# payments/services/scenarios.py

"""
ALLOCATION ROUTER

Classifies a payment request ONCE into exactly one scenario:

    service, no booking        -> GuestService
    service + booking          -> BookingService
    booking + rooms            -> SplitRoom
    booking, no rooms/service  -> FullBooking

Anything else (nothing given, rooms without a booking, service together with
rooms) is an InvalidScenarioError. The request never carries an amount: the
payable amount is always derived from outstanding balances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from backend.exceptions import InvalidScenarioError
from promotions.services.promotion_validator import PromotionApplication


@dataclass(frozen=True)
class PaymentRequest:
    payment_method: str
    transaction_type: str
    booking_id: Optional[str] = None
    booking_room_ids: tuple = ()
    service_usage_id: Optional[str] = None
    transaction_ref: str = ""
    description: str = ""
    employee: object = None
    promotion_applications: tuple = field(default_factory=tuple)


# ============================================================
# SCENARIOS (TAGGED UNION)
# ============================================================


@dataclass(frozen=True)
class FullBooking:
    booking_id: str


@dataclass(frozen=True)
class SplitRoom:
    booking_id: str
    booking_room_ids: tuple


@dataclass(frozen=True)
class BookingService:
    booking_id: str
    service_usage_id: str


@dataclass(frozen=True)
class GuestService:
    service_usage_id: str


Scenario = Union[FullBooking, SplitRoom, BookingService, GuestService]


def _dedupe(ids) -> tuple:
    seen = []
    for value in ids or ():
        value = str(value)
        if value not in seen:
            seen.append(value)
    return tuple(seen)


def classify_payment(request: PaymentRequest) -> Scenario:
    booking_id = str(request.booking_id) if request.booking_id else None
    service_usage_id = str(request.service_usage_id) if request.service_usage_id else None
    room_ids = _dedupe(request.booking_room_ids)

    if service_usage_id and room_ids:
        raise InvalidScenarioError(
            "Invalid payment scenario: a service payment cannot also select booking rooms"
        )

    if service_usage_id and not booking_id:
        return GuestService(service_usage_id=service_usage_id)

    if service_usage_id and booking_id:
        return BookingService(booking_id=booking_id, service_usage_id=service_usage_id)

    if booking_id and room_ids:
        return SplitRoom(booking_id=booking_id, booking_room_ids=room_ids)

    if booking_id:
        return FullBooking(booking_id=booking_id)

    raise InvalidScenarioError("Invalid payment scenario")


def build_request(
    *,
    payment_method: str,
    transaction_type: str,
    booking_id=None,
    booking_room_ids=None,
    service_usage_id=None,
    transaction_ref: str = "",
    description: str = "",
    employee=None,
    promotion_applications=None,
) -> PaymentRequest:
    """
    Normalizes loose inputs (lists, dicts from serializers) into a PaymentRequest.
    """
    applications = []
    for app in promotion_applications or ():
        if isinstance(app, PromotionApplication):
            applications.append(app)
            continue
        applications.append(
            PromotionApplication(
                customer_promotion_id=str(app["customer_promotion_id"]),
                booking_room_id=str(app["booking_room_id"]) if app.get("booking_room_id") else None,
                service_usage_id=str(app["service_usage_id"]) if app.get("service_usage_id") else None,
            )
        )

    return PaymentRequest(
        payment_method=payment_method,
        transaction_type=transaction_type,
        booking_id=booking_id,
        booking_room_ids=tuple(booking_room_ids or ()),
        service_usage_id=service_usage_id,
        transaction_ref=transaction_ref or "",
        description=description or "",
        employee=employee,
        promotion_applications=tuple(applications),
    )
