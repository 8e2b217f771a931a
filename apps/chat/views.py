"""API views for the quote chat."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.events.models import EventService
from .serializers import (
    ChatAccessSerializer,
    ChatInfoSerializer,
    ChatMessageSerializer,
    SendMessageSerializer,
)
from .services import (
    NO_PERMISSION_REASON,
    ChatAccessError,
    can_access,
    chat_info,
    list_messages,
    send_message,
)


class EventServiceChatMixin:
    """Carrega o orçamento da URL antes de tratar a requisição."""

    event_service: EventService

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)  # type: ignore
        self.event_service = get_object_or_404(
            EventService.objects.select_related("event", "event__client", "service", "provider"),
            pk=kwargs["event_service_id"],
        )

    def _ensure_participant(self, user) -> None:
        event_service = self.event_service
        if user.pk not in (event_service.provider_id, event_service.event.client_id):
            raise PermissionDenied(NO_PERMISSION_REASON)


class ChatAccessView(EventServiceChatMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, event_service_id: int):  # type: ignore
        access = can_access(self.event_service, request.user)
        return Response(ChatAccessSerializer(access).data)


class ChatInfoView(EventServiceChatMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, event_service_id: int):  # type: ignore
        self._ensure_participant(request.user)
        info = chat_info(self.event_service, request.user)
        return Response(ChatInfoSerializer(info).data)


class ChatMessagesView(EventServiceChatMixin, APIView):
    """Lista (GET) e envia (POST) mensagens do chat de um orçamento."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, event_service_id: int):  # type: ignore
        try:
            messages = list_messages(self.event_service, request.user)
        except ChatAccessError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(ChatMessageSerializer(messages, many=True).data)

    def post(self, request, event_service_id: int):  # type: ignore
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            chat_message = send_message(self.event_service, request.user, serializer.validated_data["message"])
        except ChatAccessError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(ChatMessageSerializer(chat_message).data, status=status.HTTP_201_CREATED)
