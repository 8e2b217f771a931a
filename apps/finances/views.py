"""API views for payments."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.events.models import Event
from apps.users.api.permissions import IsClient
from .serializers import PaymentLinkRequestSerializer
from .services import (
    PaymentLinkError,
    PaymentRuleError,
    generate_payment_link,
    payable_quotes,
    payment_summary,
)


class PaymentLinkView(APIView):
    """Gera o link de pagamento dos orçamentos aprovados de uma festa."""

    permission_classes = [IsClient]

    def post(self, request, format=None):  # type: ignore
        serializer = PaymentLinkRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        event = get_object_or_404(Event, pk=data["event_id"], client=request.user)
        try:
            result = generate_payment_link(request.user, event, data["service_ids"])
        except PaymentRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentLinkError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(result, status=status.HTTP_200_OK)


class PaymentSummaryView(APIView):
    """Valores, taxa da plataforma e total dos orçamentos selecionados."""

    permission_classes = [IsClient]

    def get(self, request, event_id: int, format=None):  # type: ignore
        event = get_object_or_404(Event, pk=event_id, client=request.user)
        ids = [int(value) for value in request.query_params.getlist("service_ids") if value.isdigit()]
        try:
            quotes = payable_quotes(request.user, event, ids)
        except PaymentRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(payment_summary(event, quotes))
