"""URL routing for the platform admin API."""

from django.urls import path, include  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AdminEventViewSet, AdminQuoteViewSet, AdminServiceViewSet, AdminUserViewSet

router = DefaultRouter()
router.register(r"events", AdminEventViewSet, basename="admin-event")
router.register(r"users", AdminUserViewSet, basename="admin-user")
router.register(r"services", AdminServiceViewSet, basename="admin-service")
router.register(r"quotes", AdminQuoteViewSet, basename="admin-quote")

urlpatterns = [
    path("", include(router.urls)),
]
