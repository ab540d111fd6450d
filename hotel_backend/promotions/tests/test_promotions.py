# promotions/tests/test_promotions.py

from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from backend.exceptions import BadRequestError, NotFoundError
from bookings.models import Customer
from promotions.models import CustomerPromotion, Promotion
from promotions.services.discount_calculator import calculate_discount
from promotions.services.promotion_service import (
    active_promotions,
    claim_promotion,
    create_promotion,
    expire_promotions,
    update_promotion,
)
from promotions.services.promotion_validator import (
    PromotionApplication,
    validate_promotion_applications,
)


def _promotion(**overrides):
    now = timezone.now()
    data = {
        "code": "TEST10",
        "type": Promotion.TYPE_PERCENTAGE,
        "scope": Promotion.SCOPE_ALL,
        "value": Decimal("10"),
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=30),
    }
    data.update(overrides)
    data.setdefault("remaining_qty", data.get("total_qty"))
    return Promotion.objects.create(**data)


class DiscountCalculatorTests(TestCase):
    """
    GUARANTEES:
    - Percentage discounts are rounded to cents and capped by max_discount
    - Fixed discounts never exceed the base
    - Minimum spend not met means no discount
    """

    def test_percentage_is_capped_by_max_discount(self):
        promotion = _promotion(value=Decimal("50"), max_discount=Decimal("100"))
        self.assertEqual(calculate_discount(promotion, Decimal("1000")), Decimal("100.00"))

    def test_percentage_rounds_half_up(self):
        promotion = _promotion(value=Decimal("15"))
        # 15% of 0.30 = 0.045
        self.assertEqual(calculate_discount(promotion, Decimal("0.30")), Decimal("0.05"))

    def test_fixed_amount_never_exceeds_base(self):
        promotion = _promotion(type=Promotion.TYPE_FIXED_AMOUNT, value=Decimal("80"))
        self.assertEqual(calculate_discount(promotion, Decimal("50")), Decimal("50.00"))
        self.assertEqual(calculate_discount(promotion, Decimal("500")), Decimal("80.00"))

    def test_minimum_spend_not_met(self):
        promotion = _promotion(min_booking_amount=Decimal("200"))
        self.assertEqual(calculate_discount(promotion, Decimal("199.99")), Decimal("0.00"))
        self.assertEqual(calculate_discount(promotion, Decimal("200")), Decimal("20.00"))

    def test_zero_base(self):
        promotion = _promotion()
        self.assertEqual(calculate_discount(promotion, Decimal("0")), Decimal("0.00"))


class PromotionClaimTests(TestCase):
    """
    GUARANTEES:
    - per_customer_limit claims succeed, the next one fails
    - remaining_qty is decremented and enforced
    - Disabled / out-of-window promotions cannot be claimed
    """

    def setUp(self):
        self.customer = Customer.objects.create(full_name="Claire Claimer")

    def test_claim_limit(self):
        _promotion(code="TWICE", per_customer_limit=2)

        claim_promotion(customer_id=self.customer.id, code="TWICE")
        claim_promotion(customer_id=self.customer.id, code="TWICE")

        with self.assertRaisesMessage(BadRequestError, "already claimed this promotion 2 time(s)"):
            claim_promotion(customer_id=self.customer.id, code="TWICE")

        self.assertEqual(
            CustomerPromotion.objects.filter(customer=self.customer).count(), 2
        )

    def test_remaining_quantity(self):
        promotion = _promotion(code="LAST1", total_qty=1)
        other = Customer.objects.create(full_name="Late Comer")

        claim_promotion(customer_id=self.customer.id, code="LAST1")
        promotion.refresh_from_db()
        self.assertEqual(promotion.remaining_qty, 0)

        with self.assertRaisesMessage(BadRequestError, "no longer available"):
            claim_promotion(customer_id=other.id, code="LAST1")

    def test_unknown_code(self):
        with self.assertRaises(NotFoundError):
            claim_promotion(customer_id=self.customer.id, code="NOPE")

    def test_disabled_promotion(self):
        _promotion(code="OFF", disabled_at=timezone.now() - timedelta(minutes=1))

        with self.assertRaisesMessage(BadRequestError, "disabled"):
            claim_promotion(customer_id=self.customer.id, code="OFF")

    def test_outside_window(self):
        now = timezone.now()
        _promotion(code="LATER", start_date=now + timedelta(days=1), end_date=now + timedelta(days=2))

        with self.assertRaisesMessage(BadRequestError, "not valid at this time"):
            claim_promotion(customer_id=self.customer.id, code="LATER")


class PromotionManagementTests(TestCase):
    def test_create_sets_remaining_quantity(self):
        now = timezone.now()
        promotion = create_promotion(
            code="NEW5",
            type=Promotion.TYPE_FIXED_AMOUNT,
            value=Decimal("5"),
            start_date=now,
            end_date=now + timedelta(days=1),
            total_qty=10,
        )
        self.assertEqual(promotion.remaining_qty, 10)

    def test_duplicate_code(self):
        _promotion(code="DUP")
        now = timezone.now()

        with self.assertRaisesMessage(BadRequestError, 'Promotion code "DUP" already exists'):
            create_promotion(
                code="DUP",
                type=Promotion.TYPE_PERCENTAGE,
                value=Decimal("5"),
                start_date=now,
                end_date=now + timedelta(days=1),
            )

    def test_percentage_over_100_is_rejected(self):
        now = timezone.now()
        with self.assertRaises(BadRequestError):
            create_promotion(
                code="HUGE",
                type=Promotion.TYPE_PERCENTAGE,
                value=Decimal("150"),
                start_date=now,
                end_date=now + timedelta(days=1),
            )

    def test_disable_removes_from_active_list(self):
        promotion = _promotion(code="SOON-OFF")
        self.assertIn(promotion, active_promotions())

        update_promotion(promotion_id=promotion.id, changes={"disabled_at": timezone.now()})

        self.assertNotIn(promotion, active_promotions())

    def test_blank_code_is_rejected_on_update(self):
        promotion = _promotion(code="KEEPME")

        with self.assertRaisesMessage(BadRequestError, "Promotion code is required"):
            update_promotion(promotion_id=promotion.id, changes={"code": "   "})

        promotion.refresh_from_db()
        self.assertEqual(promotion.code, "KEEPME")

    def test_total_quantity_change_keeps_claimed_count(self):
        promotion = _promotion(code="POOL", total_qty=10, remaining_qty=7)

        update_promotion(promotion_id=promotion.id, changes={"total_qty": 20})
        promotion.refresh_from_db()
        self.assertEqual(promotion.remaining_qty, 17)

        update_promotion(promotion_id=promotion.id, changes={"total_qty": 2})
        promotion.refresh_from_db()
        self.assertEqual(promotion.remaining_qty, 0)

    def test_explicit_remaining_quantity_wins(self):
        promotion = _promotion(code="POOL2", total_qty=10, remaining_qty=7)

        update_promotion(
            promotion_id=promotion.id,
            changes={"total_qty": 20, "remaining_qty": 5},
        )
        promotion.refresh_from_db()
        self.assertEqual(promotion.total_qty, 20)
        self.assertEqual(promotion.remaining_qty, 5)


class PromotionValidatorTests(TestCase):
    """
    GUARANTEES:
    - Scope must match the application target
    - Only AVAILABLE claims can be applied
    - A claim cannot be applied twice in one payment
    """

    def setUp(self):
        self.customer = Customer.objects.create(full_name="Val Idator")

    def _claim(self, **promotion_fields):
        promotion = _promotion(**promotion_fields)
        return CustomerPromotion.objects.create(customer=self.customer, promotion=promotion)

    def test_room_scope_rejects_service_target(self):
        claim = self._claim(code="ROOMONLY", scope=Promotion.SCOPE_ROOM)
        application = PromotionApplication(
            customer_promotion_id=str(claim.id),
            service_usage_id="5c2a2d4e-4a54-4f0e-8f1b-3e3e0f2d9a11",
        )

        with self.assertRaisesMessage(BadRequestError, "room charges"):
            validate_promotion_applications([application])

    def test_service_scope_rejects_room_target(self):
        claim = self._claim(code="SVCONLY", scope=Promotion.SCOPE_SERVICE)
        application = PromotionApplication(
            customer_promotion_id=str(claim.id),
            booking_room_id="5c2a2d4e-4a54-4f0e-8f1b-3e3e0f2d9a11",
        )

        with self.assertRaisesMessage(BadRequestError, "service charges"):
            validate_promotion_applications([application])

    def test_used_claim_is_rejected(self):
        claim = self._claim(code="USEDUP")
        claim.status = CustomerPromotion.STATUS_USED
        claim.save()

        with self.assertRaisesMessage(BadRequestError, "Promotion is used"):
            validate_promotion_applications(
                [PromotionApplication(customer_promotion_id=str(claim.id))]
            )

    def test_duplicate_application(self):
        claim = self._claim(code="TWINS")
        application = PromotionApplication(customer_promotion_id=str(claim.id))

        with self.assertRaises(BadRequestError):
            validate_promotion_applications([application, application])

    def test_missing_claim(self):
        with self.assertRaises(NotFoundError):
            validate_promotion_applications(
                [PromotionApplication(customer_promotion_id="5c2a2d4e-4a54-4f0e-8f1b-3e3e0f2d9a11")]
            )


class PromotionCommandTests(TestCase):
    def test_expire_marks_ended_claims(self):
        customer = Customer.objects.create(full_name="Ex Pired")
        now = timezone.now()
        ended = _promotion(code="ENDED", start_date=now - timedelta(days=10), end_date=now - timedelta(days=1))
        running = _promotion(code="RUNNING")

        old = CustomerPromotion.objects.create(customer=customer, promotion=ended)
        fresh = CustomerPromotion.objects.create(customer=customer, promotion=running)

        self.assertEqual(expire_promotions(), 1)

        old.refresh_from_db()
        fresh.refresh_from_db()
        self.assertEqual(old.status, CustomerPromotion.STATUS_EXPIRED)
        self.assertEqual(fresh.status, CustomerPromotion.STATUS_AVAILABLE)

    def test_expire_command(self):
        out = StringIO()
        call_command("expire_promotions", stdout=out)
        self.assertIn("Expired 0 customer promotion(s).", out.getvalue())

    def test_seed_is_idempotent(self):
        call_command("seed_promotions", stdout=StringIO())
        call_command("seed_promotions", stdout=StringIO())

        self.assertEqual(
            Promotion.objects.filter(
                code__in=["WELCOME2024", "ROOM50K", "SERVICE20", "SUMMER2024"]
            ).count(),
            4,
        )
