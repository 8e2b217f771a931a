"""Serializers for authentication flows (register, login, password reset)."""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.notifications.services import send_email_notification
from .formatters import remove_mask
from .models import PasswordResetToken


User = get_user_model()

MIN_PASSWORD_LENGTH = 8


def _digits_field(value: str, lengths: tuple[int, ...], message: str) -> str:
    digits = remove_mask(value)
    if len(digits) not in lengths:
        raise serializers.ValidationError(message)
    return digits


class _BaseRegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=MIN_PASSWORD_LENGTH, write_only=True)
    password_confirm = serializers.CharField(write_only=True)
    phone = serializers.CharField()

    role: str = ""

    def validate_email(self, value: str) -> str:
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Este email já está cadastrado.")
        return value

    def validate_phone(self, value: str) -> str:
        return _digits_field(value, (10, 11), "Telefone deve ter 10 ou 11 dígitos.")

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("password") != attrs.get("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "As senhas não coincidem."})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        validated_data.pop("password_confirm", None)
        return User.objects.create_user(password=password, role=self.role, **validated_data)


class RegisterClientSerializer(_BaseRegisterSerializer):
    full_name = serializers.CharField(max_length=255)
    cpf = serializers.CharField()

    role = User.RoleChoices.CLIENT

    def validate_full_name(self, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Nome deve ter pelo menos 2 caracteres.")
        return value

    def validate_cpf(self, value: str) -> str:
        cpf = _digits_field(value, (11,), "CPF deve ter 11 dígitos.")
        if User.objects.filter(cpf=cpf).exists():
            raise serializers.ValidationError("Este CPF já está cadastrado.")
        return cpf


class RegisterProviderSerializer(_BaseRegisterSerializer):
    organization_name = serializers.CharField(max_length=255)
    cnpj = serializers.CharField()
    area_of_operation = serializers.CharField(max_length=255)
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)

    role = User.RoleChoices.PROVIDER

    def validate_organization_name(self, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Nome da empresa deve ter pelo menos 2 caracteres.")
        return value

    def validate_cnpj(self, value: str) -> str:
        cnpj = _digits_field(value, (14,), "CNPJ deve ter 14 dígitos.")
        if User.objects.filter(cnpj=cnpj).exists():
            raise serializers.ValidationError("Este CNPJ já está cadastrado.")
        return cnpj

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        validated_data["whatsapp_number"] = validated_data["phone"]
        if not validated_data.get("full_name"):
            validated_data["full_name"] = validated_data["organization_name"]
        return super().create(validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        email = attrs.get("email", "")
        password = attrs.get("password", "")

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise serializers.ValidationError({"email": "Email ou senha incorretos."})

        if user.is_deleted or not user.is_active:
            raise serializers.ValidationError({"email": "Email ou senha incorretos."})

        if user.is_locked:
            raise serializers.ValidationError(
                {"non_field_errors": ["Conta temporariamente bloqueada. Tente novamente mais tarde."]}
            )

        if not user.check_password(password):
            user.register_failed_attempt(threshold=5)
            raise serializers.ValidationError({"email": "Email ou senha incorretos."})

        user.unlock()
        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        attrs["user"] = user
        return attrs


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    @transaction.atomic
    def issue_token(self) -> PasswordResetToken | None:
        user = User.objects.filter(email__iexact=self.validated_data["email"], is_deleted=False).first()
        if user is None:
            # Same response for unknown emails, nothing to send
            return None

        PasswordResetToken.objects.filter(user=user, is_used=False).update(is_used=True)

        code = f"{secrets.randbelow(1_000_000):06d}"
        token = PasswordResetToken.objects.create(
            user=user,
            code=code,
            expires_at=timezone.now() + timedelta(minutes=15),
            attempts_left=3,
            is_used=False,
        )

        send_email_notification(
            recipient_email=user.email,
            subject="Código para redefinir sua senha - Be Fest",
            template_name=None,
            context={"message": f"Seu código para redefinir a senha é: {code}. Ele expira em 15 minutos."},
        )
        return token


class PasswordResetConfirmSerializer(serializers.Serializer):
    email = serializers.EmailField()
    code = serializers.CharField()
    new_password = serializers.CharField(min_length=MIN_PASSWORD_LENGTH)
    new_password_confirm = serializers.CharField()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("new_password") != attrs.get("new_password_confirm"):
            raise serializers.ValidationError({"new_password_confirm": "As senhas não coincidem."})
        try:
            user = User.objects.get(email__iexact=attrs.get("email", ""), is_deleted=False)
        except User.DoesNotExist:
            raise serializers.ValidationError({"code": "Código inválido."})
        attrs["user"] = user
        return attrs

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        # No atomic block: failed attempts must persist when validation fails
        user = validated_data["user"]
        code = validated_data["code"]

        try:
            token = PasswordResetToken.objects.filter(
                user=user,
                is_used=False,
            ).latest("created_at")
        except PasswordResetToken.DoesNotExist:
            raise serializers.ValidationError({"code": "Código não encontrado. Solicite um novo."})

        if token.is_expired:
            token.mark_used()
            raise serializers.ValidationError({"code": "Código expirado. Solicite um novo."})

        if token.attempts_left == 0:
            token.mark_used()
            raise serializers.ValidationError({"code": "Número de tentativas excedido. Solicite um novo código."})

        if token.code != code:
            token.decrement_attempt()
            raise serializers.ValidationError({"code": "Código inválido."})

        user.set_password(validated_data["new_password"])
        user.save(update_fields=["password"])
        token.mark_used()
        return user
