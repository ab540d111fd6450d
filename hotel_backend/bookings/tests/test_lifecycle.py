# bookings/tests/test_lifecycle.py

from decimal import Decimal

from django.test import TestCase

from backend.exceptions import InvalidTransitionError, NotFoundError
from bookings.models import Booking, BookingRoom, Customer
from bookings.services.booking_lifecycle import (
    apply_transition,
    can_transition,
    confirm_if_pending,
)
from bookings.services.booking_totals import update_booking_totals


class BookingLifecycleTests(TestCase):
    """
    Booking / room status rules.

    GUARANTEES:
    - Only table transitions are accepted
    - Terminal statuses never move
    - Deposit confirmation touches PENDING rows only
    """

    def setUp(self):
        self.customer = Customer.objects.create(full_name="Ada Guest")
        self.booking = Booking.objects.create(customer=self.customer)

    def test_pending_can_be_confirmed_or_cancelled(self):
        self.assertTrue(
            can_transition(from_status=Booking.STATUS_PENDING, to_status=Booking.STATUS_CONFIRMED)
        )
        self.assertTrue(
            can_transition(from_status=Booking.STATUS_PENDING, to_status=Booking.STATUS_CANCELLED)
        )
        self.assertFalse(
            can_transition(from_status=Booking.STATUS_PENDING, to_status=Booking.STATUS_CHECKED_OUT)
        )

    def test_terminal_status_is_final(self):
        self.booking.status = Booking.STATUS_CHECKED_OUT

        with self.assertRaises(InvalidTransitionError):
            apply_transition(instance=self.booking, target_status=Booking.STATUS_CONFIRMED)

    def test_confirm_if_pending_leaves_other_statuses(self):
        self.assertTrue(confirm_if_pending(self.booking))
        self.assertEqual(self.booking.status, Booking.STATUS_CONFIRMED)

        self.booking.status = Booking.STATUS_CHECKED_IN
        self.assertFalse(confirm_if_pending(self.booking))
        self.assertEqual(self.booking.status, Booking.STATUS_CHECKED_IN)

    def test_booking_code_is_generated(self):
        self.assertTrue(self.booking.booking_code.startswith("BK"))


class BookingTotalsTests(TestCase):
    def setUp(self):
        customer = Customer.objects.create(full_name="Grace Guest")
        self.booking = Booking.objects.create(
            customer=customer,
            total_amount=Decimal("250.00"),
            balance=Decimal("250.00"),
        )
        self.room_a = BookingRoom.objects.create(
            booking=self.booking,
            room_number="101",
            price_per_night=Decimal("100.00"),
            nights=1,
        )
        self.room_b = BookingRoom.objects.create(
            booking=self.booking,
            room_number="102",
            price_per_night=Decimal("75.00"),
            nights=2,
        )

    def test_room_snapshot_on_create(self):
        self.assertEqual(self.room_b.subtotal_room, Decimal("150.00"))
        self.assertEqual(self.room_b.total_amount, Decimal("150.00"))
        self.assertEqual(self.room_b.balance, Decimal("150.00"))

    def test_totals_are_derived_from_rooms(self):
        self.room_a.total_paid = Decimal("40.00")
        self.room_a.save()
        self.room_b.total_paid = Decimal("10.00")
        self.room_b.save()

        booking = update_booking_totals(self.booking.id)

        self.assertEqual(booking.total_paid, Decimal("50.00"))
        self.assertEqual(booking.balance, Decimal("200.00"))
        self.assertEqual(booking.balance, booking.total_amount - booking.total_paid)

    def test_unknown_booking_is_not_found(self):
        with self.assertRaises(NotFoundError):
            update_booking_totals("00000000-0000-0000-0000-000000000000")
