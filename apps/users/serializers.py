"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .formatters import format_cnpj, format_cpf, format_phone, format_postal_code, remove_mask

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Perfil público do usuário com documentos formatados."""

    display_name = serializers.CharField(read_only=True)
    cpf_formatted = serializers.SerializerMethodField()
    cnpj_formatted = serializers.SerializerMethodField()
    phone_formatted = serializers.SerializerMethodField()
    postal_code_formatted = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "display_name",
            "role",
            "phone",
            "phone_formatted",
            "whatsapp_number",
            "cpf",
            "cpf_formatted",
            "organization_name",
            "cnpj",
            "cnpj_formatted",
            "area_of_operation",
            "logo_url",
            "profile_image",
            "city",
            "state",
            "postal_code",
            "postal_code_formatted",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_cpf_formatted(self, obj) -> str:
        return format_cpf(obj.cpf) if obj.cpf else ""

    def get_cnpj_formatted(self, obj) -> str:
        return format_cnpj(obj.cnpj) if obj.cnpj else ""

    def get_phone_formatted(self, obj) -> str:
        return format_phone(obj.phone) if obj.phone else ""

    def get_postal_code_formatted(self, obj) -> str:
        return format_postal_code(obj.postal_code) if obj.postal_code else ""


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Atualização dos dados pessoais/empresariais do próprio usuário."""

    class Meta:
        model = User
        fields = [
            "full_name",
            "phone",
            "whatsapp_number",
            "organization_name",
            "cnpj",
            "area_of_operation",
            "logo_url",
            "profile_image",
        ]

    def validate_full_name(self, value: str) -> str:
        value = value.strip()
        if value and len(value) < 2:
            raise serializers.ValidationError("Nome deve ter pelo menos 2 caracteres.")
        return value

    def to_internal_value(self, data):  # type: ignore
        data = data.copy()
        for field in ("phone", "whatsapp_number", "cnpj"):
            if data.get(field):
                data[field] = remove_mask(data[field])
        return super().to_internal_value(data)

    def validate_cnpj(self, value: str) -> str:
        if value and User.objects.filter(cnpj=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError("Este CNPJ já está cadastrado.")
        return value


class AddressUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["city", "state", "postal_code"]
        extra_kwargs = {
            "city": {"required": True, "allow_blank": False},
            "state": {"required": True, "allow_blank": False},
            "postal_code": {"required": True, "allow_blank": False},
        }

    def to_internal_value(self, data):  # type: ignore
        data = data.copy()
        if data.get("postal_code"):
            data["postal_code"] = remove_mask(data["postal_code"])
        if data.get("state"):
            data["state"] = str(data["state"]).strip().upper()
        return super().to_internal_value(data)

    def validate_state(self, value: str) -> str:
        if len(value) != 2 or not value.isalpha():
            raise serializers.ValidationError("UF deve ter 2 letras.")
        return value


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=8)
    new_password_confirm = serializers.CharField(write_only=True)

    def validate_current_password(self, value: str) -> str:
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Senha atual incorreta.")
        return value

    def validate(self, attrs):  # type: ignore
        if attrs["new_password"] != attrs["new_password_confirm"]:
            raise serializers.ValidationError({"new_password_confirm": "As senhas não coincidem."})
        if attrs["new_password"] == attrs["current_password"]:
            raise serializers.ValidationError({"new_password": "A nova senha deve ser diferente da atual."})
        return attrs

    def save(self, **kwargs):  # type: ignore
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user
