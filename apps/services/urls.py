"""URL routing for the service catalogue."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    ServiceAgePricingRuleViewSet,
    ServiceDateSurchargeViewSet,
    ServiceGuestTierViewSet,
    ServiceViewSet,
)

router = DefaultRouter()
router.register(r"", ServiceViewSet, basename="service")

tier_list = ServiceGuestTierViewSet.as_view({"get": "list", "post": "create"})
tier_detail = ServiceGuestTierViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)

age_rule_list = ServiceAgePricingRuleViewSet.as_view({"get": "list", "post": "create"})
age_rule_detail = ServiceAgePricingRuleViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)

surcharge_list = ServiceDateSurchargeViewSet.as_view({"get": "list", "post": "create"})
surcharge_detail = ServiceDateSurchargeViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)

urlpatterns = [
    # Guest tiers
    path("<int:service_id>/guest-tiers/", tier_list, name="service-guest-tier-list"),
    path("<int:service_id>/guest-tiers/<int:pk>/", tier_detail, name="service-guest-tier-detail"),
    # Age pricing rules
    path("<int:service_id>/age-rules/", age_rule_list, name="service-age-rule-list"),
    path("<int:service_id>/age-rules/<int:pk>/", age_rule_detail, name="service-age-rule-detail"),
    # Date surcharges
    path("<int:service_id>/date-surcharges/", surcharge_list, name="service-date-surcharge-list"),
    path(
        "<int:service_id>/date-surcharges/<int:pk>/",
        surcharge_detail,
        name="service-date-surcharge-detail",
    ),
    path("", include(router.urls)),
]
