# payments/tests/builders.py

"""
Small fixture builders shared by the payment tests.
"""

from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from bookings.models import Booking, BookingRoom, Customer
from hotel_services.models import Service, ServiceUsage
from promotions.models import CustomerPromotion, Promotion


def make_booking(*room_prices, customer=None):
    """
    One booking, one room per price (1 night each), in the given order.
    """
    customer = customer or Customer.objects.create(full_name="Test Guest")
    total = sum((Decimal(p) for p in room_prices), Decimal("0.00"))

    booking = Booking.objects.create(
        customer=customer,
        total_amount=total,
        balance=total,
    )

    base = timezone.now()
    rooms = []
    for index, price in enumerate(room_prices):
        rooms.append(
            BookingRoom.objects.create(
                booking=booking,
                room_number=str(101 + index),
                price_per_night=Decimal(price),
                nights=1,
                # explicit ordering, independent of clock resolution
                created_at=base + timedelta(seconds=index),
            )
        )

    return booking, rooms


def make_usage(price, *, booking=None, booking_room=None, customer=None, quantity=1, name=None):
    service, _ = Service.objects.get_or_create(
        name=name or f"Service {price}",
        defaults={"price": Decimal(price)},
    )
    unit_price = Decimal(service.price)
    if booking_room is not None and booking is None:
        booking = booking_room.booking

    return ServiceUsage.objects.create(
        booking=booking,
        booking_room=booking_room,
        customer=customer,
        service=service,
        quantity=quantity,
        unit_price=unit_price,
        total_price=unit_price * quantity,
    )


def make_claim(customer, **overrides):
    now = timezone.now()
    data = {
        "code": f"PROMO-{Promotion.objects.count() + 1}",
        "type": Promotion.TYPE_PERCENTAGE,
        "scope": Promotion.SCOPE_ALL,
        "value": Decimal("10"),
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=30),
    }
    data.update(overrides)
    promotion = Promotion.objects.create(**data)
    return CustomerPromotion.objects.create(customer=customer, promotion=promotion)
