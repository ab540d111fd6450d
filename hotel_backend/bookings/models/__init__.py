# bookings/models/__init__.py

from .booking import Booking
from .booking_room import BookingRoom
from .customer import Customer

__all__ = [
    "Booking",
    "BookingRoom",
    "Customer",
]
