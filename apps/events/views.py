"""API views for events, quotes and the cart."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.services.models import Service
from apps.users.api.permissions import IsClient, IsProvider
from .models import Event, EventService
from .serializers import (
    CartAddSerializer,
    CartEventSerializer,
    CartSerializer,
    CartSyncSerializer,
    ClientQuoteUpdateSerializer,
    EventSerializer,
    EventServiceSerializer,
    EventStatusSerializer,
    EventWriteSerializer,
    ProviderQuoteUpdateSerializer,
    QuoteRequestSerializer,
)
from .services import (
    CartError,
    EventRuleError,
    QuoteError,
    add_service_to_cart,
    cancel_quote,
    change_event_status,
    clean_duplicate_services,
    delete_event,
    ensure_event_editable,
    get_cart_event,
    pending_requests_for_provider,
    remove_service_from_cart,
    request_quote,
    save_cart_event,
    sync_cart,
    update_quote_as_client,
    update_quote_as_provider,
)


def _bad_request(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class IsEventOwnerOrReadOnly(permissions.BasePermission):
    """Somente o cliente dono altera a festa; prestadores e admins apenas leem."""

    message = "Evento não encontrado ou acesso negado"

    def has_object_permission(self, request, view, obj: Event):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.client_id == request.user.id


class EventViewSet(viewsets.ModelViewSet):
    """Festas do cliente.

    Prestadores veem as festas em que têm orçamento; administradores veem todas.
    """

    queryset = Event.objects.select_related("client").prefetch_related(
        "event_services__service", "event_services__provider"
    )
    permission_classes = [permissions.IsAuthenticated, IsEventOwnerOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["status"]
    ordering_fields = ["event_date", "created_at"]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [IsClient()]
        if self.action == "provider":
            return [IsProvider()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if self.action == "provider":
            return qs.filter(event_services__provider=user).distinct()
        if user.is_platform_admin():
            return qs
        if user.is_provider():
            return qs.filter(event_services__provider=user).distinct()
        return qs.filter(client=user)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return EventWriteSerializer
        return EventSerializer

    def perform_create(self, serializer):  # type: ignore
        serializer.save(client=self.request.user, status=Event.Status.DRAFT)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        read_serializer = EventSerializer(serializer.instance, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        try:
            ensure_event_editable(instance)
        except EventRuleError as exc:
            return _bad_request(exc)
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        read_serializer = EventSerializer(serializer.instance, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        event = self.get_object()
        try:
            delete_event(event)
        except EventRuleError as exc:
            return _bad_request(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        event = self.get_object()
        serializer = EventStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            change_event_status(event, serializer.validated_data["status"])
        except EventRuleError as exc:
            return _bad_request(exc)
        return Response(EventSerializer(event, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["get"])
    def provider(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = EventSerializer(page if page is not None else queryset, many=True)
        if page is not None:
            return self.get_paginated_response(serializer.data)
        return Response(serializer.data)


class EventServiceViewSet(viewsets.ModelViewSet):
    """Orçamentos (serviços solicitados para uma festa)."""

    serializer_class = EventServiceSerializer
    queryset = EventService.objects.select_related("event", "event__client", "service", "provider")
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["booking_status", "event"]
    ordering_fields = ["created_at", "updated_at"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [IsClient()]
        if self.action in {"change_status", "pending"}:
            return [IsProvider()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if user.is_platform_admin():
            return qs
        if user.is_provider():
            return qs.filter(provider=user)
        return qs.filter(event__client=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = QuoteRequestSerializer(data=request.data, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            event_service = request_quote(data["event"], data["service"], data.get("client_notes", ""))
        except QuoteError as exc:
            return _bad_request(exc)
        return Response(EventServiceSerializer(event_service).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        event_service = self.get_object()
        user = request.user
        try:
            if event_service.provider_id == user.id:
                serializer = ProviderQuoteUpdateSerializer(data=request.data, partial=True)
                serializer.is_valid(raise_exception=True)
                update_quote_as_provider(event_service, serializer.validated_data)
            elif event_service.event.client_id == user.id:
                serializer = ClientQuoteUpdateSerializer(data=request.data)
                serializer.is_valid(raise_exception=True)
                update_quote_as_client(event_service, serializer.validated_data["client_notes"])
            else:
                return Response({"detail": "Acesso negado"}, status=status.HTTP_403_FORBIDDEN)
        except QuoteError as exc:
            return _bad_request(exc)
        return Response(EventServiceSerializer(event_service).data)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        event_service = self.get_object()
        try:
            cancel_quote(event_service, request.user)
        except QuoteError as exc:
            return _bad_request(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        event_service = self.get_object()
        serializer = ProviderQuoteUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data.get("booking_status")
        if not new_status:
            return Response({"booking_status": ["Este campo é obrigatório."]}, status=status.HTTP_400_BAD_REQUEST)
        try:
            update_quote_as_provider(event_service, {"booking_status": new_status})
        except QuoteError as exc:
            return _bad_request(exc)
        return Response(EventServiceSerializer(event_service).data)

    @action(detail=False, methods=["get"])
    def pending(self, request):  # type: ignore
        serializer = EventServiceSerializer(pending_requests_for_provider(request.user), many=True)
        return Response(serializer.data)


class CartView(APIView):
    """Carrinho: festa em rascunho com os serviços escolhidos.

    GET devolve o carrinho (`?event_id=` opcional), POST cria/atualiza a festa.
    """

    permission_classes = [IsClient]

    def get(self, request):  # type: ignore
        event_id = request.query_params.get("event_id")
        if event_id and not event_id.isdigit():
            return Response({"event_id": ["Informe um número válido."]}, status=status.HTTP_400_BAD_REQUEST)
        event = get_cart_event(request.user, int(event_id) if event_id else None)
        if event is None:
            return Response({"detail": "Evento não encontrado"}, status=status.HTTP_404_NOT_FOUND)
        return Response(CartSerializer(event).data)

    def post(self, request):  # type: ignore
        serializer = CartEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        event_id = data.pop("event_id", None)
        try:
            event = save_cart_event(request.user, data, event_id=event_id)
        except CartError as exc:
            return _bad_request(exc)
        code = status.HTTP_200_OK if event_id else status.HTTP_201_CREATED
        return Response(CartSerializer(event).data, status=code)


class CartItemsView(APIView):
    permission_classes = [IsClient]

    def post(self, request):  # type: ignore
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        event = get_object_or_404(Event, pk=data["event_id"], client=request.user)
        service = get_object_or_404(Service, pk=data["service_id"])
        try:
            line, created = add_service_to_cart(request.user, event, service, data.get("client_notes") or "")
        except CartError as exc:
            return _bad_request(exc)
        code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return Response(EventServiceSerializer(line).data, status=code)


class CartItemDetailView(APIView):
    permission_classes = [IsClient]

    def delete(self, request, pk):  # type: ignore
        line = get_object_or_404(EventService.objects.select_related("event"), pk=pk, event__client=request.user)
        try:
            remove_service_from_cart(request.user, line)
        except CartError as exc:
            return _bad_request(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartSyncView(APIView):
    permission_classes = [IsClient]

    def post(self, request):  # type: ignore
        serializer = CartSyncSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        party = dict(data["party"])
        party.pop("event_id", None)
        try:
            result = sync_cart(request.user, party, data["items"], event_id=data.get("event_id"))
        except CartError as exc:
            return _bad_request(exc)
        return Response(result, status=status.HTTP_200_OK)


class CartCleanDuplicatesView(APIView):
    permission_classes = [IsClient]

    def post(self, request, event_id):  # type: ignore
        event = get_object_or_404(Event, pk=event_id, client=request.user)
        removed = clean_duplicate_services(event)
        return Response({"removed_count": removed})
