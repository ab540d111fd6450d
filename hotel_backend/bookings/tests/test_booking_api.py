# bookings/tests/test_booking_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from bookings.models import Booking, BookingRoom, Customer

User = get_user_model()


class BookingSnapshotAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        customer = Customer.objects.create(full_name="Snap Shot")
        self.booking = Booking.objects.create(
            customer=customer,
            total_amount=Decimal("120.00"),
            balance=Decimal("120.00"),
        )
        BookingRoom.objects.create(
            booking=self.booking,
            room_number="410",
            price_per_night=Decimal("60.00"),
            nights=2,
        )

    def test_superuser_reads_snapshot(self):
        admin = User.objects.create_superuser(username="root", email="", password="pass")
        self.client.force_authenticate(admin)

        response = self.client.get(reverse("bookings-detail", args=[self.booking.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["customer_name"], "Snap Shot")
        self.assertEqual(len(response.data["booking_rooms"]), 1)
        self.assertEqual(response.data["booking_rooms"][0]["subtotal_room"], "120.00")

    def test_user_without_role_is_forbidden(self):
        self.client.force_authenticate(User.objects.create_user(username="guest", password="pass"))

        response = self.client.get(reverse("bookings-detail", args=[self.booking.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
