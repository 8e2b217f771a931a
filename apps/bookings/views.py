"""API views for the booking domain."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsClient
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingFromQuoteSerializer,
    BookingSerializer,
    BookingUpdateSerializer,
)
from .services import (
    BookingRuleError,
    cancel_booking,
    create_booking,
    create_booking_from_quote,
    update_booking,
)


class IsBookingStakeholder(permissions.BasePermission):
    """Cliente, prestador do serviço e administradores têm acesso à reserva."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if user.is_platform_admin():
            return True
        if user.is_provider():
            return obj.service.provider_id == user.id
        return obj.client_id == user.id


class BookingViewSet(viewsets.ModelViewSet):
    """Viewset para criar e acompanhar reservas."""

    queryset = Booking.objects.select_related("event", "service", "client").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "event", "service"]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_permissions(self):  # type: ignore
        if self.action in {"create", "from_quote"}:
            return [IsClient()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if user.is_platform_admin():
            return qs
        if user.is_provider():
            return qs.filter(service__provider=user)
        return qs.filter(client=user)

    def _created(self, booking: Booking) -> Response:
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            booking = create_booking(
                request.user,
                data["event"],
                data["service"],
                guest_count=data.get("guest_count"),
                notes=data.get("notes", ""),
            )
        except BookingRuleError as exc:
            return Response({"non_field_errors": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)
        return self._created(booking)

    @action(detail=False, methods=["post"], url_path="from-quote")
    def from_quote(self, request):  # type: ignore
        serializer = BookingFromQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            booking = create_booking_from_quote(request.user, data["event_service"], data.get("notes", ""))
        except BookingRuleError as exc:
            return Response({"non_field_errors": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)
        return self._created(booking)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            update_booking(booking, request.user, serializer.validated_data)
        except BookingRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        try:
            cancel_booking(booking, request.user)
        except BookingRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": booking.status}, status=status.HTTP_200_OK)
