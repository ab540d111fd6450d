# bookings/views.py

from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated

from bookings.models import Booking
from bookings.serializers import BookingSerializer
from permissions.roles import CAP_BOOKINGS_VIEW, HasCapability


class BookingViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    GET /api/bookings/<id>/  -> booking snapshot with rooms
    """

    queryset = (
        Booking.objects
        .select_related("customer")
        .prefetch_related("booking_rooms")
    )
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_BOOKINGS_VIEW
