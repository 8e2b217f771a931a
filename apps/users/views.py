"""User profile API views."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .serializers import (
    AddressUpdateSerializer,
    PasswordChangeSerializer,
    ProfileUpdateSerializer,
    UserSerializer,
)
from .services import AccountDeletionError, delete_account

User = get_user_model()


class UserViewSet(viewsets.GenericViewSet):
    """Perfil do usuário autenticado.

    - `me` (GET/PATCH/DELETE) lê, atualiza ou exclui a própria conta
    - `address` atualiza cidade, UF e CEP
    - `change_password` troca a senha mediante a senha atual
    - `{id}/public` expõe o perfil público de um prestador
    """

    serializer_class = UserSerializer
    queryset = User.objects.filter(is_active=True)
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=["get", "patch", "delete"])
    def me(self, request):
        user = request.user
        if request.method == "PATCH":
            serializer = ProfileUpdateSerializer(user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(UserSerializer(user).data)
        if request.method == "DELETE":
            try:
                delete_account(user)
            except AccountDeletionError as exc:
                return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(UserSerializer(user).data)

    @action(detail=False, methods=["put", "patch"])
    def address(self, request):
        serializer = AddressUpdateSerializer(request.user, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=["post"], url_path="change-password")
    def change_password(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"detail": "Senha alterada com sucesso."})

    @action(
        detail=True,
        methods=["get"],
        url_path="public",
        permission_classes=[permissions.AllowAny],
    )
    def public(self, request, pk=None):
        provider = self.get_object()
        if not provider.is_provider():
            return Response(status=status.HTTP_404_NOT_FOUND)
        data = {
            "id": provider.id,
            "organization_name": provider.organization_name,
            "full_name": provider.full_name,
            "area_of_operation": provider.area_of_operation,
            "logo_url": provider.logo_url,
            "city": provider.city,
            "state": provider.state,
            "whatsapp_number": provider.whatsapp_number,
        }
        return Response(data)
