# hotel_services/views.py

"""
SERVICE USAGE API

    GET   /api/service-usages/          list (filter by booking / room / status)
    POST  /api/service-usages/          create guest / booking / room usage
    GET   /api/service-usages/<id>/
    PATCH /api/service-usages/<id>/     quantity and/or status
    GET   /api/service-usages/services/ active service catalogue

All writes go through hotel_services.services.usage_service.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.exceptions import DomainError, domain_error_response
from hotel_services.models import Service, ServiceUsage
from hotel_services.serializers import (
    ServiceSerializer,
    ServiceUsageCreateSerializer,
    ServiceUsageSerializer,
    ServiceUsageUpdateSerializer,
)
from hotel_services.services.usage_service import (
    create_service_usage,
    update_service_usage,
)
from permissions.roles import CAP_SERVICES_MANAGE, HasCapability


class ServiceUsageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = ServiceUsage.objects.select_related("service").order_by("-created_at")
    serializer_class = ServiceUsageSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_SERVICES_MANAGE
    filterset_fields = ["booking", "booking_room", "customer", "status"]

    @extend_schema(request=ServiceUsageCreateSerializer, responses={201: ServiceUsageSerializer})
    def create(self, request):
        serializer = ServiceUsageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            usage = create_service_usage(employee=request.user, **serializer.validated_data)
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(ServiceUsageSerializer(usage).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ServiceUsageUpdateSerializer, responses={200: ServiceUsageSerializer})
    def partial_update(self, request, pk=None):
        serializer = ServiceUsageUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            usage = update_service_usage(
                usage_id=pk,
                quantity=serializer.validated_data.get("quantity"),
                status=serializer.validated_data.get("status"),
                employee=request.user,
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(ServiceUsageSerializer(usage).data)

    @action(detail=False, methods=["get"])
    def services(self, request):
        catalogue = Service.objects.filter(is_active=True)
        return Response(ServiceSerializer(catalogue, many=True).data)
