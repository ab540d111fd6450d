# bookings/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from bookings.views import BookingViewSet

router = SimpleRouter()
router.register(r"", BookingViewSet, basename="bookings")

urlpatterns = [
    path("", include(router.urls)),
]
