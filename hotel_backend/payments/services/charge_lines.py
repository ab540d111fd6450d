# payments/services/charge_lines.py

"""
CHARGE-LINE BUILDER

Turns a scenario into an ordered list of outstanding charges, each one
targeting exactly one BookingRoom or ServiceUsage:

    base_amount = current balance of the target

Targets with balance <= 0 are skipped.

Ordering (full booking / split room):
- rooms in room order (created_at, id)
- each room followed by its non-cancelled service usages in creation order

All targets are loaded with select_for_update: call inside the payment's
atomic block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from backend.exceptions import BadRequestError, NotFoundError
from bookings.models import Booking, BookingRoom
from hotel_services.models import ServiceUsage
from payments.services.scenarios import (
    BookingService,
    FullBooking,
    GuestService,
    Scenario,
    SplitRoom,
)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass
class ChargeLine:
    base_amount: Decimal
    booking_room: Optional[BookingRoom] = None
    service_usage: Optional[ServiceUsage] = None

    # Filled in by discount allocation
    targeted_discount: Decimal = ZERO
    shared_discount: Decimal = ZERO

    @property
    def booking_room_id(self):
        return self.booking_room.id if self.booking_room is not None else None

    @property
    def service_usage_id(self):
        return self.service_usage.id if self.service_usage is not None else None

    @property
    def discount_amount(self) -> Decimal:
        return self.targeted_discount + self.shared_discount

    @property
    def amount(self) -> Decimal:
        return self.base_amount - self.discount_amount


@dataclass
class ChargePlan:
    scenario: Scenario
    booking: Optional[Booking]
    lines: list = field(default_factory=list)
    requested_rooms: list = field(default_factory=list)

    @property
    def is_guest(self) -> bool:
        return isinstance(self.scenario, GuestService)

    def touched_rooms(self) -> list:
        """
        Rooms named by a room line, owning a service line, or explicitly
        requested (split room). Room order, no duplicates.
        """
        rooms = {}
        for line in self.lines:
            if line.booking_room is not None:
                rooms.setdefault(line.booking_room.id, line.booking_room)
            elif line.service_usage is not None and line.service_usage.booking_room_id:
                room = line.service_usage.booking_room
                rooms.setdefault(room.id, room)
        for room in self.requested_rooms:
            rooms.setdefault(room.id, room)
        return list(rooms.values())


# ============================================================
# LOCKING LOADERS
# ============================================================


def _lock_booking(booking_id) -> Booking:
    try:
        return Booking.objects.select_for_update().get(pk=booking_id)
    except Booking.DoesNotExist as exc:
        raise NotFoundError("Booking not found") from exc


def _lock_usage(usage_id) -> ServiceUsage:
    try:
        return ServiceUsage.objects.select_for_update().get(pk=usage_id)
    except ServiceUsage.DoesNotExist as exc:
        raise NotFoundError("Service usage not found") from exc


def _room_lines(rooms: list) -> list:
    lines = []

    usages_by_room = {}
    usages = (
        ServiceUsage.objects
        .select_for_update()
        .filter(booking_room__in=[r.id for r in rooms])
        .exclude(status=ServiceUsage.STATUS_CANCELLED)
        .order_by("created_at", "id")
    )
    for usage in usages:
        usages_by_room.setdefault(usage.booking_room_id, []).append(usage)

    for room in rooms:
        room_balance = _money(room.total_amount) - _money(room.total_paid)
        if room_balance > ZERO:
            lines.append(ChargeLine(base_amount=room_balance, booking_room=room))

        for usage in usages_by_room.get(room.id, []):
            # Share the locked room instance for later status updates
            usage.booking_room = room
            usage_balance = _money(usage.balance)
            if usage_balance > ZERO:
                lines.append(ChargeLine(base_amount=usage_balance, service_usage=usage))

    return lines


# ============================================================
# PER-SCENARIO BUILDERS
# ============================================================


def _full_booking(scenario: FullBooking) -> ChargePlan:
    booking = _lock_booking(scenario.booking_id)
    rooms = list(
        BookingRoom.objects
        .select_for_update()
        .filter(booking=booking)
        .order_by("created_at", "id")
    )
    return ChargePlan(scenario=scenario, booking=booking, lines=_room_lines(rooms))


def _split_room(scenario: SplitRoom) -> ChargePlan:
    booking = _lock_booking(scenario.booking_id)
    rooms = list(
        BookingRoom.objects
        .select_for_update()
        .filter(booking=booking, id__in=list(scenario.booking_room_ids))
        .order_by("created_at", "id")
    )

    # All-or-nothing: every requested room must belong to this booking
    if len(rooms) != len(scenario.booking_room_ids):
        found = {str(r.id) for r in rooms}
        missing = [rid for rid in scenario.booking_room_ids if rid not in found]
        raise NotFoundError(
            f"Booking room(s) not found in booking: {', '.join(missing)}"
        )

    return ChargePlan(
        scenario=scenario,
        booking=booking,
        lines=_room_lines(rooms),
        requested_rooms=rooms,
    )


def _check_usage_payable(usage: ServiceUsage):
    if usage.status == ServiceUsage.STATUS_CANCELLED:
        raise BadRequestError("Cannot pay for cancelled service")

    if _money(usage.balance) <= ZERO:
        raise BadRequestError("Service usage is already paid")


def _booking_service(scenario: BookingService) -> ChargePlan:
    booking = _lock_booking(scenario.booking_id)
    usage = _lock_usage(scenario.service_usage_id)

    if usage.booking_room_id:
        room = BookingRoom.objects.select_for_update().get(pk=usage.booking_room_id)
        usage.booking_room = room
        belongs = room.booking_id == booking.id
    else:
        belongs = usage.booking_id == booking.id

    if not belongs:
        raise BadRequestError("Service usage does not belong to this booking")

    _check_usage_payable(usage)

    line = ChargeLine(base_amount=_money(usage.balance), service_usage=usage)
    return ChargePlan(scenario=scenario, booking=booking, lines=[line])


def _guest_service(scenario: GuestService) -> ChargePlan:
    usage = _lock_usage(scenario.service_usage_id)

    if usage.booking_id or usage.booking_room_id:
        raise BadRequestError(
            "Service usage belongs to a booking; pay it through the booking"
        )

    _check_usage_payable(usage)

    line = ChargeLine(base_amount=_money(usage.balance), service_usage=usage)
    return ChargePlan(scenario=scenario, booking=None, lines=[line])


def build_charge_plan(scenario: Scenario) -> ChargePlan:
    if isinstance(scenario, FullBooking):
        return _full_booking(scenario)
    if isinstance(scenario, SplitRoom):
        return _split_room(scenario)
    if isinstance(scenario, BookingService):
        return _booking_service(scenario)
    if isinstance(scenario, GuestService):
        return _guest_service(scenario)

    raise TypeError(f"Unknown payment scenario: {scenario!r}")
