"""Service catalogue API views."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsOwnerProvider, IsProvider, IsProviderOrReadOnly
from shared.domain.value_objects import GuestBreakdown
from .filters import ServiceFilterSet
from .models import Service, ServiceAgePricingRule, ServiceDateSurcharge, ServiceGuestTier
from .pricing import calculate_budget
from .serializers import (
    BudgetCalculationSerializer,
    ServiceAgePricingRuleSerializer,
    ServiceDateSurchargeSerializer,
    ServiceGuestTierSerializer,
    ServiceGuestTierWriteSerializer,
    ServiceQuoteQuerySerializer,
    ServiceSerializer,
    ServiceWriteSerializer,
)
from .services import ServiceDeletionError, delete_service, provider_stats


class ServiceViewSet(viewsets.ModelViewSet):
    """Catálogo de serviços: leitura pública, escrita pelo prestador dono."""

    queryset = Service.objects.select_related("provider").prefetch_related(
        "guest_tiers", "age_pricing_rules", "date_surcharges"
    )
    permission_classes = [IsProviderOrReadOnly, IsOwnerProvider]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ServiceFilterSet
    ordering_fields = ["created_at", "price_per_guest", "base_price", "name"]

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "quote"}:
            return [permissions.AllowAny()]
        if self.action in {"mine", "stats"}:
            return [IsProvider()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if self.action == "mine":
            return qs.filter(provider=user)
        if user.is_authenticated and user.is_platform_admin():
            return qs
        if self.action in {"list", "quote"} or not user.is_authenticated:
            return qs.filter(status=Service.Status.ACTIVE)
        # Owners still see and manage their inactive services
        return qs.filter(Q(status=Service.Status.ACTIVE) | Q(provider=user))

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return ServiceWriteSerializer
        return ServiceSerializer

    def perform_create(self, serializer):  # type: ignore
        serializer.save(provider=self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        read_serializer = ServiceSerializer(serializer.instance, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        read_serializer = ServiceSerializer(serializer.instance, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        service = self.get_object()
        try:
            delete_service(service)
        except ServiceDeletionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):  # type: ignore
        service = self.get_object()
        service.toggle_status()
        return Response(ServiceSerializer(service, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["get"])
    def quote(self, request, pk=None):  # type: ignore
        """
        Simulação de orçamento.

        Query params: `full`, `half`, `free` e `event_date` (opcional, AAAA-MM-DD).
        """
        service = self.get_object()
        params = ServiceQuoteQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        budget = calculate_budget(
            service,
            GuestBreakdown(data["full"], data["half"], data["free"]),
            event_date=data.get("event_date"),
        )
        return Response(BudgetCalculationSerializer(budget).data)

    @action(detail=False, methods=["get"])
    def mine(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ServiceSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)
        serializer = ServiceSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(provider_stats(request.user))


class ServiceOwnedMixin:
    """Resolve o serviço da URL e verifica se o usuário pode alterá-lo."""

    service_lookup_url_kwarg = "service_id"
    permission_classes = [IsProviderOrReadOnly, IsOwnerProvider]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        service_id = kwargs.get(self.service_lookup_url_kwarg)
        self.service_object = get_object_or_404(Service, pk=service_id)
        self.check_object_permissions(request, self.service_object)

    def get_service(self) -> Service:
        return self.service_object

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["service"] = getattr(self, "service_object", None)
        return context

    def perform_create(self, serializer):  # type: ignore
        serializer.save(service=self.get_service())


class ServiceGuestTierViewSet(ServiceOwnedMixin, viewsets.ModelViewSet):
    """Faixas de preço por quantidade de convidados."""

    queryset = ServiceGuestTier.objects.select_related("service").all()

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return ServiceGuestTierWriteSerializer
        return ServiceGuestTierSerializer

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(service=self.get_service()).order_by("min_total_guests")

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        read_serializer = ServiceGuestTierSerializer(serializer.instance, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        read_serializer = ServiceGuestTierSerializer(serializer.instance, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_200_OK)


class ServiceAgePricingRuleViewSet(ServiceOwnedMixin, viewsets.ModelViewSet):
    """Regras de preço por faixa etária."""

    serializer_class = ServiceAgePricingRuleSerializer
    queryset = ServiceAgePricingRule.objects.select_related("service").all()

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(service=self.get_service()).order_by("age_min_years")


class ServiceDateSurchargeViewSet(ServiceOwnedMixin, viewsets.ModelViewSet):
    """Sobretaxas por período (feriados, alta temporada)."""

    serializer_class = ServiceDateSurchargeSerializer
    queryset = ServiceDateSurcharge.objects.select_related("service").all()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset().filter(service=self.get_service())
        start = self.request.query_params.get("start")
        end = self.request.query_params.get("end")
        if start:
            qs = qs.filter(end_date__gte=start)
        if end:
            qs = qs.filter(start_date__lte=end)
        return qs.order_by("start_date")
