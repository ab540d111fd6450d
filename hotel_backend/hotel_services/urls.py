# hotel_services/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from hotel_services.views import ServiceUsageViewSet

router = SimpleRouter()
router.register(r"", ServiceUsageViewSet, basename="service-usages")

urlpatterns = [
    path("", include(router.urls)),
]
