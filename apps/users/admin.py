"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser, PasswordResetToken


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            _("Dados pessoais"),
            {"fields": ("full_name", "phone", "whatsapp_number", "cpf", "profile_image")},
        ),
        (
            _("Empresa"),
            {"fields": ("organization_name", "cnpj", "area_of_operation", "logo_url")},
        ),
        (_("Endereço"), {"fields": ("city", "state", "postal_code")}),
        (_("Perfil"), {"fields": ("role", "is_deleted")}),
        (_("Segurança"), {"fields": ("failed_login_attempts", "locked_until")}),
        (
            _("Permissões"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Datas"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "role", "password1", "password2"),
            },
        ),
    )
    list_display = ("email", "full_name", "organization_name", "role", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_deleted", "state")
    search_fields = ("email", "full_name", "organization_name", "cpf", "cnpj")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at", "last_login", "date_joined")


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "expires_at", "attempts_left", "is_used", "created_at")
    list_filter = ("is_used",)
    search_fields = ("user__email",)
