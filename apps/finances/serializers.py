"""Serializers for payment endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class PaymentLinkRequestSerializer(serializers.Serializer):
    event_id = serializers.IntegerField()
    service_ids = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        default=list,
        help_text="Ids dos orçamentos; vazio paga todos os aprovados.",
    )
