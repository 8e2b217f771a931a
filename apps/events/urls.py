"""URL routing for events, quotes and the cart."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    CartCleanDuplicatesView,
    CartItemDetailView,
    CartItemsView,
    CartSyncView,
    CartView,
    EventServiceViewSet,
    EventViewSet,
)

router = DefaultRouter()
router.register(r"quotes", EventServiceViewSet, basename="event-service")
router.register(r"", EventViewSet, basename="event")

urlpatterns = [
    # Cart
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/items/", CartItemsView.as_view(), name="cart-items"),
    path("cart/items/<int:pk>/", CartItemDetailView.as_view(), name="cart-item-detail"),
    path("cart/sync/", CartSyncView.as_view(), name="cart-sync"),
    path(
        "cart/<int:event_id>/clean-duplicates/",
        CartCleanDuplicatesView.as_view(),
        name="cart-clean-duplicates",
    ),
    path("", include(router.urls)),
]
