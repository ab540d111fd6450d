# promotions/views.py

"""
PROMOTIONS API

    GET   /api/promotions/                   active promotions
    POST  /api/promotions/                   create (promotions.manage)
    PATCH /api/promotions/<id>/              update / disable (promotions.manage)
    POST  /api/promotions/claim/             customer claims a code (promotions.claim)
    GET   /api/promotions/claimed/?customer= claims still usable by a customer
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.exceptions import DomainError, domain_error_response, error_response
from permissions.roles import (
    CAP_PROMOTIONS_CLAIM,
    CAP_PROMOTIONS_MANAGE,
    HasCapability,
)
from promotions.serializers import (
    CustomerPromotionSerializer,
    PromotionClaimSerializer,
    PromotionCreateSerializer,
    PromotionSerializer,
    PromotionUpdateSerializer,
)
from promotions.services.promotion_service import (
    active_promotions,
    available_customer_promotions,
    claim_promotion,
    create_promotion,
    update_promotion,
)


class PromotionListCreateView(APIView):
    # Listing is open to any staff member, creating needs promotions.manage
    required_capability = CAP_PROMOTIONS_MANAGE

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), HasCapability()]
        return [IsAuthenticated()]

    @extend_schema(responses={200: PromotionSerializer(many=True)})
    def get(self, request):
        return Response(PromotionSerializer(active_promotions(), many=True).data)

    @extend_schema(request=PromotionCreateSerializer, responses={201: PromotionSerializer})
    def post(self, request):
        serializer = PromotionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            promotion = create_promotion(employee=request.user, **serializer.validated_data)
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(PromotionSerializer(promotion).data, status=status.HTTP_201_CREATED)


class PromotionDetailView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PROMOTIONS_MANAGE

    @extend_schema(request=PromotionUpdateSerializer, responses={200: PromotionSerializer})
    def patch(self, request, pk):
        serializer = PromotionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            promotion = update_promotion(
                promotion_id=pk,
                changes=dict(serializer.validated_data),
                employee=request.user,
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(PromotionSerializer(promotion).data)


class PromotionClaimView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PROMOTIONS_CLAIM

    @extend_schema(request=PromotionClaimSerializer, responses={201: CustomerPromotionSerializer})
    def post(self, request):
        serializer = PromotionClaimSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            claim = claim_promotion(
                customer_id=serializer.validated_data["customer_id"],
                code=serializer.validated_data["code"],
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(CustomerPromotionSerializer(claim).data, status=status.HTTP_201_CREATED)


class ClaimedPromotionListView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PROMOTIONS_CLAIM

    @extend_schema(
        parameters=[OpenApiParameter("customer", str, required=True)],
        responses={200: CustomerPromotionSerializer(many=True)},
    )
    def get(self, request):
        customer_id = request.query_params.get("customer")
        if not customer_id:
            return error_response(
                code="BAD_REQUEST",
                message="customer query parameter is required",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            customer_id = serializers.UUIDField().run_validation(customer_id)
        except serializers.ValidationError:
            return error_response(
                code="BAD_REQUEST",
                message="customer must be a valid id",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        claims = available_customer_promotions(customer_id=customer_id)
        return Response(CustomerPromotionSerializer(claims, many=True).data)
