# hotel_services/tests/test_service_usage_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from bookings.models import Booking, BookingRoom, Customer
from hotel_services.models import Service, ServiceUsage
from permissions.roles import ROLE_CASHIER, ROLE_RECEPTIONIST

User = get_user_model()


class ServiceUsageAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.receptionist = User.objects.create_user(username="frontdesk", password="pass")
        self.receptionist.groups.add(Group.objects.create(name=ROLE_RECEPTIONIST))

        self.cashier = User.objects.create_user(username="till", password="pass")
        self.cashier.groups.add(Group.objects.create(name=ROLE_CASHIER))

        customer = Customer.objects.create(full_name="Usage Guest")
        self.booking = Booking.objects.create(customer=customer)
        self.room = BookingRoom.objects.create(
            booking=self.booking,
            room_number="305",
            price_per_night=Decimal("90.00"),
        )
        self.service = Service.objects.create(name="Breakfast", price=Decimal("15.00"))

    def test_create_room_usage(self):
        self.client.force_authenticate(self.receptionist)

        response = self.client.post(
            reverse("service-usages-list"),
            {"service_id": str(self.service.id), "quantity": 2, "booking_room_id": str(self.room.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["total_price"], "30.00")
        self.assertEqual(str(response.data["booking"]), str(self.booking.id))

    def test_update_status_and_reject_quantity_after_transfer(self):
        self.client.force_authenticate(self.receptionist)
        created = self.client.post(
            reverse("service-usages-list"),
            {"service_id": str(self.service.id), "quantity": 1},
            format="json",
        ).data
        url = reverse("service-usages-detail", args=[created["id"]])

        response = self.client.patch(url, {"status": ServiceUsage.STATUS_TRANSFERRED}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], ServiceUsage.STATUS_TRANSFERRED)

        response = self.client.patch(url, {"quantity": 3}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("transferred", response.data["error"]["message"])

    def test_invalid_transition_code(self):
        self.client.force_authenticate(self.receptionist)
        created = self.client.post(
            reverse("service-usages-list"),
            {"service_id": str(self.service.id), "quantity": 1},
            format="json",
        ).data

        response = self.client.patch(
            reverse("service-usages-detail", args=[created["id"]]),
            {"status": ServiceUsage.STATUS_COMPLETED},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "INVALID_TRANSITION")

    def test_cashier_cannot_create_usage(self):
        self.client.force_authenticate(self.cashier)

        response = self.client.post(
            reverse("service-usages-list"),
            {"service_id": str(self.service.id), "quantity": 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(ServiceUsage.objects.exists())

    def test_service_catalogue(self):
        self.client.force_authenticate(self.receptionist)

        response = self.client.get(reverse("service-usages-services"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s["name"] for s in response.data], ["Breakfast"])
