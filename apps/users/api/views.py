"""API views for platform admin operations."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.events.models import Event, EventService
from apps.services.models import Service
from apps.users.models import CustomUser
from apps.users.services import AdminDeletionError, delete_client, delete_provider
from .permissions import IsPlatformAdmin
from .serializers import (
    AdminEventDetailSerializer,
    AdminEventListSerializer,
    AdminQuoteSerializer,
    AdminServiceSerializer,
    AdminUserSerializer,
)


class AdminEventViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Festas da plataforma.

    Rascunhos ficam fora da listagem, a menos que ``?status=draft`` seja
    informado. ``?search=`` procura por título, nome ou email do cliente.
    """

    permission_classes = [IsPlatformAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["status"]
    search_fields = ["title", "location", "client__full_name", "client__email"]
    ordering_fields = ["event_date", "created_at"]
    ordering = ["-created_at"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "retrieve":
            return AdminEventDetailSerializer
        return AdminEventListSerializer

    def get_queryset(self):  # type: ignore
        qs = Event.objects.select_related("client").annotate(
            services_count=models.Count("event_services", distinct=True),
            approved_services_count=models.Count(
                "event_services",
                filter=models.Q(event_services__booking_status=EventService.BookingStatus.APPROVED),
                distinct=True,
            ),
            total_estimated_value=Coalesce(
                models.Sum("event_services__total_estimated_price"),
                models.Value(Decimal("0.00")),
                output_field=models.DecimalField(max_digits=12, decimal_places=2),
            ),
        )
        if self.action == "retrieve":
            return qs.prefetch_related("event_services__service", "event_services__provider")

        if self.request.query_params.get("status"):
            return qs
        return qs.exclude(status=Event.Status.DRAFT)


class AdminUserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Usuários por perfil (``?role=client|provider|admin``).

    A exclusão remove definitivamente o cliente (com festas e orçamentos)
    ou o prestador (com serviços, faixas de preço e orçamentos).
    """

    serializer_class = AdminUserSerializer
    permission_classes = [IsPlatformAdmin]
    queryset = CustomUser.objects.filter(is_deleted=False)
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ["role"]
    search_fields = ["email", "full_name", "organization_name"]

    def destroy(self, request, *args, **kwargs):  # type: ignore
        user = self.get_object()
        try:
            if user.is_provider():
                removed = delete_provider(user)
            else:
                removed = delete_client(user)
        except AdminDeletionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"removed": removed}, status=status.HTTP_200_OK)


class AdminServiceViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = AdminServiceSerializer
    permission_classes = [IsPlatformAdmin]
    queryset = Service.objects.select_related("provider").all()
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ["status", "category", "provider"]
    search_fields = ["name", "provider__organization_name", "provider__email"]


class AdminQuoteViewSet(viewsets.ReadOnlyModelViewSet):
    """Todos os orçamentos, com filtro ``?booking_status=``."""

    serializer_class = AdminQuoteSerializer
    permission_classes = [IsPlatformAdmin]
    queryset = EventService.objects.select_related(
        "event", "event__client", "service", "provider"
    ).order_by("-created_at")
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["booking_status", "provider", "event"]

    @action(detail=False, methods=["get"])
    def counts(self, request):  # type: ignore
        by_status: dict[str, int] = {}
        for row in EventService.objects.order_by().values("booking_status").annotate(total=models.Count("id")):
            by_status[row["booking_status"]] = row["total"]
        return Response({"total": sum(by_status.values()), "by_status": by_status})
