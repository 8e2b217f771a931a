"""Permission classes shared by the Be Fest API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsPlatformAdmin(permissions.BasePermission):
    """
    Only platform administrators (role='admin', staff or superuser).
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return hasattr(user, "is_platform_admin") and user.is_platform_admin()


class IsClient(permissions.BasePermission):
    message = "Apenas clientes podem realizar esta ação."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user.is_authenticated and hasattr(user, "is_client") and user.is_client())


class IsProvider(permissions.BasePermission):
    message = "Apenas prestadores podem realizar esta ação."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user.is_authenticated and hasattr(user, "is_provider") and user.is_provider())


class IsProviderOrReadOnly(permissions.BasePermission):
    """
    Anyone can read, only providers can write.
    """

    message = "Apenas prestadores podem gerenciar serviços."

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return True
        return hasattr(user, "is_provider") and user.is_provider()


class IsOwnerProvider(permissions.BasePermission):
    """
    Object-level permission: writes only by the provider who owns the object
    (a service or one of its pricing rules) or a platform admin.
    """

    message = "Serviço não encontrado ou acesso negado."

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return True
        provider_id = getattr(obj, "provider_id", None)
        if provider_id is None and hasattr(obj, "service"):
            provider_id = obj.service.provider_id
        return provider_id == user.id


class IsProviderOrPlatformAdmin(permissions.BasePermission):
    message = "Apenas prestadores e administradores podem acessar a agenda."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return user.is_provider() or user.is_platform_admin()
