"""API views for notifications and admin email templates."""

from __future__ import annotations

from rest_framework import mixins, viewsets, permissions, status  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin
from .models import EmailTemplate, Notification
from .serializers import (
    EmailTemplateSerializer,
    EmailTemplateUpdateSerializer,
    NotificationSerializer,
    TestEmailSerializer,
)
from .services import (
    EmailTemplateError,
    send_test_email,
    toggle_email_template,
    update_email_template,
)


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Notificações do usuário autenticado."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ['is_read']

    def get_queryset(self):  # type: ignore
        return Notification.objects.filter(user=self.request.user)

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):  # type: ignore
        notification = self.get_object()
        notification.is_read = True
        notification.save(update_fields=['is_read'])
        return Response({'status': 'read'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):  # type: ignore
        updated = self.get_queryset().filter(is_read=False).update(is_read=True)
        return Response({'updated': updated}, status=status.HTTP_200_OK)


class EmailTemplateViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Modelos de email (somente administradores).

    - GET  /api/v1/notifications/email-templates/
    - GET  /api/v1/notifications/email-templates/{type}/
    - PATCH /api/v1/notifications/email-templates/{type}/
    - POST /api/v1/notifications/email-templates/{type}/toggle/
    - POST /api/v1/notifications/email-templates/{type}/send-test/
    """

    queryset = EmailTemplate.objects.all().order_by('template_type')
    serializer_class = EmailTemplateSerializer
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]
    lookup_field = 'template_type'

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        template = self.get_object()
        serializer = EmailTemplateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            update_email_template(
                template,
                serializer.validated_data['subject'],
                serializer.validated_data['content'],
            )
        except EmailTemplateError as exc:
            return Response({'detail': str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(EmailTemplateSerializer(template).data)

    @action(detail=True, methods=['post'])
    def toggle(self, request, template_type=None):  # type: ignore
        template = toggle_email_template(self.get_object())
        return Response(EmailTemplateSerializer(template).data)

    @action(detail=True, methods=['post'], url_path='send-test')
    def send_test(self, request, template_type=None):  # type: ignore
        template = self.get_object()
        serializer = TestEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sent = send_test_email(template.template_type, serializer.validated_data['email'])
        if not sent:
            return Response(
                {'detail': 'Erro ao enviar email de teste.'},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response({'detail': 'Email de teste enviado.'})
