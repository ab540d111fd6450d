# payments/tests/test_payment_engine.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.test import TestCase

from activity.models import Activity
from backend.exceptions import (
    BadRequestError,
    ConflictError,
    InvalidScenarioError,
    NotFoundError,
)
from bookings.models import Booking, BookingRoom, Customer
from hotel_services.models import ServiceUsage
from payments.models import Transaction, TransactionDetail
from payments.services.payment_orchestrator import create_payment
from payments.tests.builders import make_booking, make_claim, make_usage
from promotions.models import CustomerPromotion, Promotion, UsedPromotion

User = get_user_model()

CASH = Transaction.METHOD_CASH
ROOM_CHARGE = Transaction.TYPE_ROOM_CHARGE
DEPOSIT = Transaction.TYPE_DEPOSIT


def _assert_balanced(test, obj, total_field="total_amount"):
    test.assertEqual(
        obj.balance,
        getattr(obj, total_field) - obj.total_paid,
        f"{obj.__class__.__name__} balance drifted",
    )


class FullBookingPaymentTests(TestCase):
    """
    GUARANTEES:
    - Amount is derived from outstanding balances
    - Σ detail amounts == transaction amount (conservation)
    - Booking totals are re-derived from rooms
    """

    def setUp(self):
        self.employee = User.objects.create_user(username="cashier", password="pass")

    def test_two_rooms_no_promotions(self):
        booking, (room_a, room_b) = make_booking("100.00", "150.00")

        result = create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            employee=self.employee,
        )

        txn = result.transaction
        self.assertEqual(txn.base_amount, Decimal("250.00"))
        self.assertEqual(txn.discount_amount, Decimal("0.00"))
        self.assertEqual(txn.amount, Decimal("250.00"))
        self.assertEqual(txn.processed_by, self.employee)

        amounts = [d.amount for d in result.details]
        self.assertEqual(amounts, [Decimal("100.00"), Decimal("150.00")])
        self.assertEqual([d.booking_room_id for d in result.details], [room_a.id, room_b.id])

        booking.refresh_from_db()
        self.assertEqual(booking.total_paid, Decimal("250.00"))
        self.assertEqual(booking.balance, Decimal("0.00"))

        for room in (room_a, room_b):
            room.refresh_from_db()
            self.assertEqual(room.balance, Decimal("0.00"))
            _assert_balanced(self, room)

    def test_room_services_follow_their_room(self):
        booking, (room_a, room_b) = make_booking("100.00", "150.00")
        minibar = make_usage("30.00", booking_room=room_a, name="Minibar")

        result = create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
        )

        targets = [(d.booking_room_id, d.service_usage_id) for d in result.details]
        self.assertEqual(
            targets,
            [(room_a.id, None), (None, minibar.id), (room_b.id, None)],
        )
        self.assertEqual(result.transaction.amount, Decimal("280.00"))

        minibar.refresh_from_db()
        self.assertEqual(minibar.status, ServiceUsage.STATUS_COMPLETED)
        self.assertEqual(minibar.balance, Decimal("0.00"))

    def test_partially_paid_room_charges_only_the_rest(self):
        booking, (room_a, room_b) = make_booking("100.00", "150.00")
        room_a.total_paid = Decimal("60.00")
        room_a.save()

        result = create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
        )

        self.assertEqual(result.transaction.base_amount, Decimal("190.00"))
        self.assertEqual(result.details[0].base_amount, Decimal("40.00"))

    def test_settled_booking_has_nothing_to_charge(self):
        booking, _ = make_booking("100.00")
        create_payment(booking_id=booking.id, payment_method=CASH, transaction_type=ROOM_CHARGE)

        with self.assertRaisesMessage(BadRequestError, "Nothing to charge"):
            create_payment(booking_id=booking.id, payment_method=CASH, transaction_type=ROOM_CHARGE)

        self.assertEqual(Transaction.objects.count(), 1)

    def test_payment_records_one_activity(self):
        booking, _ = make_booking("100.00", "150.00")

        create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            employee=self.employee,
        )

        self.assertEqual(
            Activity.objects.filter(type=Activity.TYPE_CREATE_TRANSACTION).count(), 1
        )


class SplitRoomPaymentTests(TestCase):
    def test_deposit_confirms_only_touched_rooms(self):
        booking, (room_a, room_b, room_c) = make_booking("100.00", "120.00", "90.00")

        create_payment(
            booking_id=booking.id,
            booking_room_ids=[room_a.id],
            payment_method=CASH,
            transaction_type=DEPOSIT,
        )

        booking.refresh_from_db()
        room_a.refresh_from_db()
        room_b.refresh_from_db()
        room_c.refresh_from_db()

        self.assertEqual(booking.status, Booking.STATUS_CONFIRMED)
        self.assertEqual(room_a.status, Booking.STATUS_CONFIRMED)
        self.assertEqual(room_b.status, Booking.STATUS_PENDING)
        self.assertEqual(room_c.status, Booking.STATUS_PENDING)

        self.assertEqual(booking.total_paid, Decimal("100.00"))
        self.assertEqual(booking.balance, Decimal("210.00"))

    def test_deposit_leaves_checked_in_rooms_alone(self):
        booking, (room_a,) = make_booking("100.00")
        BookingRoom.objects.filter(pk=room_a.pk).update(status=Booking.STATUS_CHECKED_IN)
        Booking.objects.filter(pk=booking.pk).update(status=Booking.STATUS_CHECKED_IN)

        create_payment(
            booking_id=booking.id,
            booking_room_ids=[room_a.id],
            payment_method=CASH,
            transaction_type=DEPOSIT,
        )

        room_a.refresh_from_db()
        booking.refresh_from_db()
        self.assertEqual(room_a.status, Booking.STATUS_CHECKED_IN)
        self.assertEqual(booking.status, Booking.STATUS_CHECKED_IN)

    def test_room_of_another_booking_fails_everything(self):
        booking, (room_a,) = make_booking("100.00")
        _, (foreign_room,) = make_booking("80.00")

        with self.assertRaises(NotFoundError):
            create_payment(
                booking_id=booking.id,
                booking_room_ids=[room_a.id, foreign_room.id],
                payment_method=CASH,
                transaction_type=ROOM_CHARGE,
            )

        room_a.refresh_from_db()
        self.assertEqual(room_a.total_paid, Decimal("0.00"))
        self.assertEqual(Transaction.objects.count(), 0)
        self.assertEqual(TransactionDetail.objects.count(), 0)


class ServicePaymentTests(TestCase):
    def test_guest_service_full_settlement(self):
        usage = make_usage("50.00")

        result = create_payment(
            service_usage_id=usage.id,
            payment_method=CASH,
            transaction_type=Transaction.TYPE_SERVICE_CHARGE,
        )

        self.assertIsNone(result.transaction)
        self.assertIsNone(result.booking)
        self.assertEqual(Transaction.objects.count(), 0)

        (detail,) = result.details
        self.assertIsNone(detail.transaction_id)
        self.assertEqual(detail.base_amount, Decimal("50.00"))
        self.assertEqual(detail.discount_amount, Decimal("0.00"))
        self.assertEqual(detail.amount, Decimal("50.00"))

        usage.refresh_from_db()
        self.assertEqual(usage.status, ServiceUsage.STATUS_COMPLETED)
        self.assertEqual(usage.total_paid, Decimal("50.00"))

    def test_guest_payment_events_carry_the_usage_customer(self):
        customer = Customer.objects.create(full_name="Walk-in Guest")
        usage = make_usage("40.00", customer=customer)

        create_payment(
            service_usage_id=usage.id,
            payment_method=CASH,
            transaction_type=Transaction.TYPE_SERVICE_CHARGE,
        )

        event = Activity.objects.get(type=Activity.TYPE_CREATE_TRANSACTION)
        self.assertEqual(event.customer_id, customer.id)
        self.assertEqual(event.service_usage_id, usage.id)

        usage_events = Activity.objects.filter(
            type=Activity.TYPE_UPDATE_SERVICE_USAGE,
            service_usage=usage,
        )
        self.assertTrue(usage_events.exists())
        self.assertFalse(usage_events.exclude(customer=customer).exists())

    def test_paid_service_is_rejected(self):
        usage = make_usage("50.00")
        create_payment(
            service_usage_id=usage.id,
            payment_method=CASH,
            transaction_type=Transaction.TYPE_SERVICE_CHARGE,
        )

        with self.assertRaisesMessage(BadRequestError, "already paid"):
            create_payment(
                service_usage_id=usage.id,
                payment_method=CASH,
                transaction_type=Transaction.TYPE_SERVICE_CHARGE,
            )

    def test_booking_usage_cannot_be_paid_as_guest(self):
        booking, _ = make_booking("100.00")
        usage = make_usage("20.00", booking=booking)

        with self.assertRaises(BadRequestError):
            create_payment(
                service_usage_id=usage.id,
                payment_method=CASH,
                transaction_type=Transaction.TYPE_SERVICE_CHARGE,
            )

    def test_booking_service_payment(self):
        booking, (room_a,) = make_booking("100.00")
        usage = make_usage("20.00", booking_room=room_a)

        result = create_payment(
            booking_id=booking.id,
            service_usage_id=usage.id,
            payment_method=CASH,
            transaction_type=Transaction.TYPE_SERVICE_CHARGE,
        )

        self.assertEqual(result.transaction.amount, Decimal("20.00"))
        self.assertEqual(result.transaction.booking_id, booking.id)

        # Room balance untouched; services carry their own balance
        room_a.refresh_from_db()
        self.assertEqual(room_a.balance, Decimal("100.00"))

    def test_service_of_another_booking_is_rejected(self):
        booking, _ = make_booking("100.00")
        other, _ = make_booking("100.00")
        usage = make_usage("20.00", booking=other)

        with self.assertRaisesMessage(BadRequestError, "does not belong"):
            create_payment(
                booking_id=booking.id,
                service_usage_id=usage.id,
                payment_method=CASH,
                transaction_type=Transaction.TYPE_SERVICE_CHARGE,
            )

    def test_cancelled_service_is_rejected(self):
        usage = make_usage("20.00")
        ServiceUsage.objects.filter(pk=usage.pk).update(status=ServiceUsage.STATUS_CANCELLED)

        with self.assertRaisesMessage(BadRequestError, "cancelled"):
            create_payment(
                service_usage_id=usage.id,
                payment_method=CASH,
                transaction_type=Transaction.TYPE_SERVICE_CHARGE,
            )


class ScenarioRoutingTests(TestCase):
    def test_empty_request(self):
        with self.assertRaises(InvalidScenarioError):
            create_payment(payment_method=CASH, transaction_type=ROOM_CHARGE)

    def test_rooms_without_booking(self):
        _, (room_a,) = make_booking("100.00")

        with self.assertRaises(InvalidScenarioError):
            create_payment(
                booking_room_ids=[room_a.id],
                payment_method=CASH,
                transaction_type=ROOM_CHARGE,
            )

    def test_service_with_rooms(self):
        booking, (room_a,) = make_booking("100.00")
        usage = make_usage("10.00", booking_room=room_a)

        with self.assertRaises(InvalidScenarioError):
            create_payment(
                booking_id=booking.id,
                booking_room_ids=[room_a.id],
                service_usage_id=usage.id,
                payment_method=CASH,
                transaction_type=ROOM_CHARGE,
            )

    def test_unknown_method(self):
        booking, _ = make_booking("100.00")

        with self.assertRaises(BadRequestError):
            create_payment(booking_id=booking.id, payment_method="CHEQUE", transaction_type=ROOM_CHARGE)

    def test_lock_failure_surfaces_as_conflict(self):
        booking, _ = make_booking("100.00")

        with mock.patch(
            "payments.services.payment_orchestrator._process_payment",
            side_effect=OperationalError("database is locked"),
        ):
            with self.assertRaises(ConflictError):
                create_payment(booking_id=booking.id, payment_method=CASH, transaction_type=ROOM_CHARGE)


class PromotionPaymentTests(TestCase):
    """
    GUARANTEES:
    - A line discount never exceeds its base
    - Transaction-level discounts are spread so details stay conserved
    - Used claims are marked USED with one UsedPromotion each
    - Any ineligible promotion aborts the payment before writes
    """

    def setUp(self):
        self.booking, self.rooms = make_booking("1000.00")
        self.customer = self.booking.customer

    def test_percentage_capped_on_room(self):
        room = self.rooms[0]
        claim = make_claim(
            self.customer,
            value=Decimal("50"),
            max_discount=Decimal("100"),
        )

        result = create_payment(
            booking_id=self.booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            promotion_applications=[
                {"customer_promotion_id": claim.id, "booking_room_id": room.id}
            ],
        )

        (detail,) = result.details
        self.assertEqual(detail.discount_amount, Decimal("100.00"))
        self.assertEqual(detail.amount, Decimal("900.00"))
        self.assertEqual(result.transaction.discount_amount, Decimal("100.00"))

        room.refresh_from_db()
        self.assertEqual(room.total_amount, Decimal("900.00"))
        self.assertEqual(room.balance, Decimal("0.00"))

        booking = Booking.objects.get(pk=self.booking.pk)
        self.assertEqual(booking.total_amount, Decimal("900.00"))
        self.assertEqual(booking.balance, Decimal("0.00"))

        claim.refresh_from_db()
        self.assertEqual(claim.status, CustomerPromotion.STATUS_USED)
        self.assertEqual(claim.transaction_detail_id, detail.id)
        self.assertIsNotNone(claim.used_at)

        used = UsedPromotion.objects.get(customer_promotion=claim)
        self.assertEqual(used.discount_amount, Decimal("100.00"))
        self.assertEqual(used.transaction_id, result.transaction.id)

    def test_stacked_discounts_never_exceed_base(self):
        booking, (room,) = make_booking("100.00")
        first = make_claim(booking.customer, type=Promotion.TYPE_FIXED_AMOUNT, value=Decimal("80"))
        second = make_claim(booking.customer, type=Promotion.TYPE_FIXED_AMOUNT, value=Decimal("80"))

        result = create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            promotion_applications=[
                {"customer_promotion_id": first.id, "booking_room_id": room.id},
                {"customer_promotion_id": second.id, "booking_room_id": room.id},
            ],
        )

        (detail,) = result.details
        self.assertEqual(detail.discount_amount, Decimal("100.00"))
        self.assertEqual(detail.amount, Decimal("0.00"))

        used = {
            u.customer_promotion_id: u.discount_amount
            for u in UsedPromotion.objects.all()
        }
        self.assertEqual(used[first.id], Decimal("80.00"))
        self.assertEqual(used[second.id], Decimal("20.00"))

    def test_transaction_level_discount_is_conserved(self):
        booking, (room_a, room_b) = make_booking("100.00", "150.00")
        claim = make_claim(booking.customer, type=Promotion.TYPE_FIXED_AMOUNT, value=Decimal("120"))

        result = create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            promotion_applications=[{"customer_promotion_id": claim.id}],
        )

        txn = result.transaction
        self.assertEqual(txn.base_amount, Decimal("250.00"))
        self.assertEqual(txn.discount_amount, Decimal("120.00"))
        self.assertEqual(txn.amount, Decimal("130.00"))

        details = list(txn.details.order_by("created_at", "id"))
        self.assertEqual(sum(d.amount for d in details), txn.amount)
        self.assertEqual(sum(d.base_amount for d in details), txn.base_amount)
        self.assertEqual(sum(d.discount_amount for d in details), txn.discount_amount)
        for detail in details:
            self.assertLessEqual(detail.discount_amount, detail.base_amount)

        by_room = {d.booking_room_id: d for d in details}
        self.assertEqual(by_room[room_a.id].discount_amount, Decimal("100.00"))
        self.assertEqual(by_room[room_b.id].discount_amount, Decimal("20.00"))

    def test_scope_mismatch_aborts_payment(self):
        booking, (room,) = make_booking("100.00")
        usage = make_usage("40.00", booking_room=room)
        claim = make_claim(booking.customer, scope=Promotion.SCOPE_ROOM)

        with self.assertRaisesMessage(BadRequestError, "room charges"):
            create_payment(
                booking_id=booking.id,
                service_usage_id=usage.id,
                payment_method=CASH,
                transaction_type=Transaction.TYPE_SERVICE_CHARGE,
                promotion_applications=[
                    {"customer_promotion_id": claim.id, "service_usage_id": usage.id}
                ],
            )

        claim.refresh_from_db()
        usage.refresh_from_db()
        self.assertEqual(claim.status, CustomerPromotion.STATUS_AVAILABLE)
        self.assertEqual(usage.total_paid, Decimal("0.00"))
        self.assertEqual(Transaction.objects.count(), 0)

    def test_target_outside_payment_is_not_consumed(self):
        booking, (room_a, room_b) = make_booking("100.00", "150.00")
        claim = make_claim(booking.customer, scope=Promotion.SCOPE_ROOM)

        result = create_payment(
            booking_id=booking.id,
            booking_room_ids=[room_a.id],
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            promotion_applications=[
                {"customer_promotion_id": claim.id, "booking_room_id": room_b.id}
            ],
        )

        self.assertEqual(result.transaction.discount_amount, Decimal("0.00"))
        claim.refresh_from_db()
        self.assertEqual(claim.status, CustomerPromotion.STATUS_AVAILABLE)
        self.assertFalse(UsedPromotion.objects.exists())

    def test_guest_service_fully_discounted(self):
        usage = make_usage("50.00")
        customer = Customer.objects.create(full_name="Free Spa")
        claim = make_claim(
            customer,
            type=Promotion.TYPE_PERCENTAGE,
            value=Decimal("100"),
            scope=Promotion.SCOPE_SERVICE,
        )

        result = create_payment(
            service_usage_id=usage.id,
            payment_method=CASH,
            transaction_type=Transaction.TYPE_SERVICE_CHARGE,
            promotion_applications=[
                {"customer_promotion_id": claim.id, "service_usage_id": usage.id}
            ],
        )

        (detail,) = result.details
        self.assertEqual(detail.amount, Decimal("0.00"))
        self.assertEqual(detail.discount_amount, Decimal("50.00"))

        usage.refresh_from_db()
        self.assertEqual(usage.status, ServiceUsage.STATUS_COMPLETED)
        self.assertEqual(usage.total_price, Decimal("0.00"))

        used = UsedPromotion.objects.get(customer_promotion=claim)
        self.assertIsNone(used.transaction_id)

    def test_minimum_spend_not_met_grants_nothing(self):
        booking, (room,) = make_booking("150.00")
        claim = make_claim(
            booking.customer,
            type=Promotion.TYPE_FIXED_AMOUNT,
            value=Decimal("30"),
            min_booking_amount=Decimal("200"),
        )

        result = create_payment(
            booking_id=booking.id,
            payment_method=CASH,
            transaction_type=ROOM_CHARGE,
            promotion_applications=[
                {"customer_promotion_id": claim.id, "booking_room_id": room.id}
            ],
        )

        (detail,) = result.details
        self.assertEqual(detail.discount_amount, Decimal("0.00"))
        self.assertEqual(detail.amount, Decimal("150.00"))
        self.assertEqual(result.transaction.discount_amount, Decimal("0.00"))
        self.assertEqual(result.transaction.amount, Decimal("150.00"))

        room.refresh_from_db()
        self.assertEqual(room.total_amount, Decimal("150.00"))
        self.assertEqual(room.balance, Decimal("0.00"))

        claim.refresh_from_db()
        self.assertEqual(claim.status, CustomerPromotion.STATUS_AVAILABLE)
        self.assertIsNone(claim.transaction_detail_id)
        self.assertFalse(UsedPromotion.objects.exists())
