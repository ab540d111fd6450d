# promotions/urls.py

from django.urls import path

from promotions.views import (
    ClaimedPromotionListView,
    PromotionClaimView,
    PromotionDetailView,
    PromotionListCreateView,
)

urlpatterns = [
    path("", PromotionListCreateView.as_view(), name="promotions"),
    path("claim/", PromotionClaimView.as_view(), name="promotions-claim"),
    path("claimed/", ClaimedPromotionListView.as_view(), name="promotions-claimed"),
    path("<uuid:pk>/", PromotionDetailView.as_view(), name="promotion-detail"),
]
