# hotel_services/services/usage_service.py

"""
SERVICE USAGE MANAGER (AUTHORITATIVE)

Owns every write to ServiceUsage:
- creation (guest / booking-level / room-specific)
- quantity and status edits
- payment-driven updates (called by the payment ledger)

RULES:
- Price is snapshotted from the Service catalogue at creation
- Quantity is editable only while PENDING
- Cancelling zeroes total_price and keeps recorded payments
- A payment that covers the charge completes the usage
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction

from activity.models import Activity
from activity.services.activity_service import record_activity
from backend.exceptions import BadRequestError, NotFoundError
from bookings.models import Booking, BookingRoom, Customer
from hotel_services.models import Service, ServiceUsage
from hotel_services.services.usage_lifecycle import (
    should_complete_on_payment,
    validate_payable,
    validate_quantity_edit,
    validate_transition,
)

logger = logging.getLogger("hotel_services")

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _scenario_label(usage: ServiceUsage) -> str:
    if usage.booking_room_id:
        return "room"
    if usage.booking_id:
        return "booking"
    return "guest"


def _usage_customer(usage: ServiceUsage):
    if usage.customer_id:
        return usage.customer
    if usage.booking_id:
        return usage.booking.customer
    if usage.booking_room_id:
        return usage.booking_room.booking.customer
    return None


# ============================================================
# CREATE
# ============================================================


@transaction.atomic
def create_service_usage(
    *,
    service_id,
    quantity: int,
    employee=None,
    booking_id=None,
    booking_room_id=None,
    customer_id=None,
) -> ServiceUsage:
    if int(quantity or 0) <= 0:
        raise BadRequestError("Quantity must be greater than zero")

    booking = None
    if booking_id:
        try:
            booking = Booking.objects.get(pk=booking_id)
        except Booking.DoesNotExist as exc:
            raise NotFoundError("Booking not found") from exc

    booking_room = None
    if booking_room_id:
        try:
            booking_room = BookingRoom.objects.select_related("booking").get(
                pk=booking_room_id
            )
        except BookingRoom.DoesNotExist as exc:
            raise NotFoundError("Booking room not found") from exc

        if booking is not None and booking_room.booking_id != booking.id:
            raise BadRequestError(
                "Booking room does not belong to the specified booking"
            )

        # Room-specific usages always carry their booking.
        booking = booking_room.booking

    try:
        service = Service.objects.get(pk=service_id)
    except Service.DoesNotExist as exc:
        raise NotFoundError("Service not found") from exc

    if not service.is_active:
        raise BadRequestError(f"Service '{service.name}' is not available")

    customer = None
    if customer_id:
        try:
            customer = Customer.objects.get(pk=customer_id)
        except Customer.DoesNotExist as exc:
            raise NotFoundError("Customer not found") from exc

    unit_price = _money(service.price)
    usage = ServiceUsage.objects.create(
        booking=booking,
        booking_room=booking_room,
        service=service,
        customer=customer,
        quantity=int(quantity),
        unit_price=unit_price,
        total_price=_money(unit_price * int(quantity)),
        total_paid=Decimal("0.00"),
        status=ServiceUsage.STATUS_PENDING,
        employee=employee if getattr(employee, "is_authenticated", False) else None,
    )

    scenario = _scenario_label(usage)
    record_activity(
        type=Activity.TYPE_CREATE_SERVICE_USAGE,
        description=f"{scenario.capitalize()} service created: {service.name} (x{usage.quantity})",
        metadata={
            "service_name": service.name,
            "quantity": usage.quantity,
            "unit_price": usage.unit_price,
            "total_price": usage.total_price,
            "scenario": scenario,
        },
        employee=employee,
        customer=customer or getattr(booking, "customer", None),
        booking_room=booking_room,
        service_usage=usage,
    )

    logger.info(
        "Service usage created",
        extra={"service_usage_id": str(usage.id), "scenario": scenario},
    )

    return usage


# ============================================================
# UPDATE (QUANTITY / STATUS)
# ============================================================


@transaction.atomic
def update_service_usage(
    *,
    usage_id,
    quantity: int | None = None,
    status: str | None = None,
    employee=None,
) -> ServiceUsage:
    try:
        usage = (
            ServiceUsage.objects
            .select_for_update()
            .select_related("service")
            .get(pk=usage_id)
        )
    except ServiceUsage.DoesNotExist as exc:
        raise NotFoundError("Service usage not found") from exc

    previous_status = usage.status
    previous_quantity = usage.quantity

    status_changes = status is not None and status != usage.status
    quantity_changes = quantity is not None and int(quantity) != usage.quantity

    # ----------------------------
    # 1) Validate everything first
    # ----------------------------
    if status_changes:
        validate_transition(usage=usage, target_status=status)

    is_cancelling = status_changes and status == ServiceUsage.STATUS_CANCELLED

    if quantity_changes and not is_cancelling:
        if int(quantity) <= 0:
            raise BadRequestError("Quantity must be greater than zero")
        validate_quantity_edit(usage=usage)

    # ----------------------------
    # 2) Apply
    # ----------------------------
    update_fields = []

    if quantity_changes and not is_cancelling:
        usage.quantity = int(quantity)
        usage.total_price = _money(Decimal(usage.unit_price) * usage.quantity)
        update_fields += ["quantity", "total_price"]

    if is_cancelling:
        usage.total_price = Decimal("0.00")
        update_fields.append("total_price")

    if status_changes:
        usage.status = status
        update_fields.append("status")

    if not update_fields:
        return usage

    update_fields.append("updated_at")
    usage.save(update_fields=update_fields)

    # ----------------------------
    # 3) Activity
    # ----------------------------
    name = usage.service.name

    if status_changes:
        descriptions = {
            ServiceUsage.STATUS_TRANSFERRED: f"Service transferred to user: {name}",
            ServiceUsage.STATUS_COMPLETED: f"Service completed: {name}",
            ServiceUsage.STATUS_CANCELLED: f"Service cancelled: {name}",
        }
        record_activity(
            type=Activity.TYPE_UPDATE_SERVICE_USAGE,
            description=descriptions.get(status, f"Service status updated to {status}: {name}"),
            metadata={
                "previous_status": previous_status,
                "new_status": status,
                "service_name": name,
            },
            employee=employee,
            booking_room=usage.booking_room,
            service_usage=usage,
        )

    if quantity_changes and not is_cancelling:
        record_activity(
            type=Activity.TYPE_UPDATE_SERVICE_USAGE,
            description=f"Service quantity updated: {name} ({previous_quantity} -> {usage.quantity})",
            metadata={
                "previous_quantity": previous_quantity,
                "new_quantity": usage.quantity,
                "service_name": name,
            },
            employee=employee,
            booking_room=usage.booking_room,
            service_usage=usage,
        )

    return usage


# ============================================================
# PAYMENT (CALLED BY THE LEDGER ONLY)
# ============================================================


def record_usage_payment(
    *,
    usage: ServiceUsage,
    amount: Decimal,
    discount: Decimal = Decimal("0.00"),
    employee=None,
) -> ServiceUsage:
    """
    Apply one allocation line to a locked ServiceUsage.

    - discount reduces the outstanding charge (total_price)
    - amount is added to total_paid
    - completes the usage once total_paid >= total_price

    Must run inside the payment's atomic block.
    """
    validate_payable(usage=usage)

    amount = _money(amount)
    discount = _money(discount)

    if amount < 0 or discount < 0:
        raise BadRequestError("Allocation amounts cannot be negative")

    if amount + discount > _money(usage.balance):
        raise BadRequestError("Allocation exceeds the outstanding service balance")

    previous_status = usage.status
    previous_total_paid = _money(usage.total_paid)

    usage.total_price = _money(usage.total_price) - discount
    usage.total_paid = previous_total_paid + amount

    if should_complete_on_payment(usage=usage):
        usage.status = ServiceUsage.STATUS_COMPLETED

    usage.save(update_fields=["total_price", "total_paid", "status", "updated_at"])

    name = usage.service.name
    customer = _usage_customer(usage)
    record_activity(
        type=Activity.TYPE_UPDATE_SERVICE_USAGE,
        description=f"Payment received for {name}: {amount}",
        metadata={
            "paid_amount": amount,
            "discount_amount": discount,
            "previous_total_paid": previous_total_paid,
            "new_total_paid": usage.total_paid,
            "balance": usage.balance,
            "service_name": name,
        },
        employee=employee,
        customer=customer,
        booking_room=usage.booking_room,
        service_usage=usage,
    )

    if usage.status == ServiceUsage.STATUS_COMPLETED and previous_status != usage.status:
        record_activity(
            type=Activity.TYPE_UPDATE_SERVICE_USAGE,
            description=f"Service completed (fully paid): {name}",
            metadata={
                "previous_status": previous_status,
                "new_status": usage.status,
                "service_name": name,
                "total_paid": usage.total_paid,
            },
            employee=employee,
            customer=customer,
            booking_room=usage.booking_room,
            service_usage=usage,
        )

    return usage
