"""API views for the admin dashboard and the agenda."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin, IsProviderOrPlatformAdmin
from .serializers import AgendaEntrySerializer, AgendaQuerySerializer
from .services import agenda_entries, dashboard_stats, month_range, week_range


class AdminDashboardView(APIView):
    """Estatísticas gerais da plataforma (somente administradores)."""

    permission_classes = [IsPlatformAdmin]

    def get(self, request, format=None):  # type: ignore
        return Response(dashboard_stats())


class AgendaView(APIView):
    """
    Agenda de festas por semana ou mês.

    Prestadores veem apenas os próprios orçamentos; administradores podem
    filtrar por prestador.
    """

    permission_classes = [IsProviderOrPlatformAdmin]

    def get(self, request, format=None):  # type: ignore
        query = AgendaQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        if "week_start" in params:
            start, end = week_range(params["week_start"])
        else:
            start, end = month_range(params["year"], params["month"])

        provider = params.get("provider")
        if not request.user.is_platform_admin():
            provider = request.user

        entries = agenda_entries(start, end, provider=provider)
        serializer = AgendaEntrySerializer(entries, many=True, context={"today": timezone.localdate()})
        return Response(
            {
                "start": start,
                "end": end,
                "entries": serializer.data,
            }
        )
