"""Serializers for services and their pricing rules."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Service, ServiceAgePricingRule, ServiceDateSurcharge, ServiceGuestTier
from .pricing import format_minimum_price_with_fee, format_tiers
from .services import TierOverlapError, ensure_tier_does_not_overlap


class ServiceGuestTierSerializer(serializers.ModelSerializer):
    guest_range = serializers.SerializerMethodField()

    class Meta:
        model = ServiceGuestTier
        fields = [
            "id",
            "min_total_guests",
            "max_total_guests",
            "guest_range",
            "base_price_per_adult",
            "tier_description",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_guest_range(self, obj: ServiceGuestTier) -> str:
        return str(obj.guest_range)


class ServiceGuestTierWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceGuestTier
        fields = [
            "min_total_guests",
            "max_total_guests",
            "base_price_per_adult",
            "tier_description",
        ]

    def validate(self, attrs):  # type: ignore
        instance = self.instance
        minimum = attrs.get("min_total_guests", getattr(instance, "min_total_guests", None))
        if "max_total_guests" in attrs:
            maximum = attrs["max_total_guests"]
        else:
            maximum = getattr(instance, "max_total_guests", None)
        if maximum is not None and minimum is not None and maximum <= minimum:
            raise serializers.ValidationError(
                {"max_total_guests": "Máximo de convidados deve ser maior que o mínimo."}
            )

        service = self.context.get("service") or getattr(instance, "service", None)
        if service is not None and minimum is not None:
            try:
                ensure_tier_does_not_overlap(
                    service,
                    minimum,
                    maximum,
                    exclude_id=getattr(instance, "pk", None),
                )
            except TierOverlapError as exc:
                raise serializers.ValidationError({"non_field_errors": [str(exc)]})
        return attrs


class ServiceAgePricingRuleSerializer(serializers.ModelSerializer):
    pricing_method_display = serializers.ReadOnlyField(source="get_pricing_method_display")

    class Meta:
        model = ServiceAgePricingRule
        fields = [
            "id",
            "rule_description",
            "age_min_years",
            "age_max_years",
            "pricing_method",
            "pricing_method_display",
            "value",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at", "pricing_method_display"]

    def validate(self, attrs):  # type: ignore
        instance = self.instance
        age_min = attrs.get("age_min_years", getattr(instance, "age_min_years", 0))
        if "age_max_years" in attrs:
            age_max = attrs["age_max_years"]
        else:
            age_max = getattr(instance, "age_max_years", None)
        if age_max is not None and age_max <= age_min:
            raise serializers.ValidationError(
                {"age_max_years": "Idade máxima deve ser maior que a idade mínima."}
            )
        return attrs


class ServiceDateSurchargeSerializer(serializers.ModelSerializer):
    surcharge_type_display = serializers.ReadOnlyField(source="get_surcharge_type_display")

    class Meta:
        model = ServiceDateSurcharge
        fields = [
            "id",
            "surcharge_description",
            "start_date",
            "end_date",
            "surcharge_type",
            "surcharge_type_display",
            "surcharge_value",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at", "surcharge_type_display"]

    def validate(self, attrs):  # type: ignore
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and start > end:
            raise serializers.ValidationError(
                {"end_date": "Data final deve ser igual ou posterior à data inicial."}
            )
        return attrs


class ServiceSerializer(serializers.ModelSerializer):
    """Leitura completa do serviço com preços formatados."""

    provider_name = serializers.CharField(source="provider.display_name", read_only=True)
    provider_city = serializers.CharField(source="provider.city", read_only=True)
    provider_state = serializers.CharField(source="provider.state", read_only=True)
    category_display = serializers.ReadOnlyField(source="get_category_display")
    status_display = serializers.ReadOnlyField(source="get_status_display")
    guest_tiers = ServiceGuestTierSerializer(many=True, read_only=True)
    age_pricing_rules = ServiceAgePricingRuleSerializer(many=True, read_only=True)
    date_surcharges = ServiceDateSurchargeSerializer(many=True, read_only=True)
    formatted_tiers = serializers.SerializerMethodField()
    min_price_with_fee = serializers.SerializerMethodField()

    class Meta:
        model = Service
        fields = [
            "id",
            "provider",
            "provider_name",
            "provider_city",
            "provider_state",
            "name",
            "description",
            "category",
            "category_display",
            "images_urls",
            "price_per_guest",
            "base_price",
            "min_guests",
            "max_guests",
            "is_active",
            "status",
            "status_display",
            "guest_tiers",
            "age_pricing_rules",
            "date_surcharges",
            "formatted_tiers",
            "min_price_with_fee",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_formatted_tiers(self, obj: Service) -> list[str]:
        return format_tiers(obj.guest_tiers.all())

    def get_min_price_with_fee(self, obj: Service) -> str:
        return format_minimum_price_with_fee(obj.guest_tiers.all())


class ServiceWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = [
            "name",
            "description",
            "category",
            "images_urls",
            "price_per_guest",
            "base_price",
            "min_guests",
            "max_guests",
            "status",
        ]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Nome do serviço é obrigatório.")
        return value

    def validate_images_urls(self, value):  # type: ignore
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise serializers.ValidationError("Informe uma lista de URLs.")
        return value

    def validate(self, attrs):  # type: ignore
        min_guests = attrs.get("min_guests", getattr(self.instance, "min_guests", 1))
        if "max_guests" in attrs:
            max_guests = attrs["max_guests"]
        else:
            max_guests = getattr(self.instance, "max_guests", None)
        if max_guests is not None and max_guests < min_guests:
            raise serializers.ValidationError(
                {"max_guests": "Máximo de convidados deve ser maior ou igual ao mínimo."}
            )
        return attrs


class ServiceQuoteQuerySerializer(serializers.Serializer):
    full = serializers.IntegerField(min_value=0, default=0)
    half = serializers.IntegerField(min_value=0, default=0)
    free = serializers.IntegerField(min_value=0, default=0)
    event_date = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        if attrs["full"] + attrs["half"] + attrs["free"] < 1:
            raise serializers.ValidationError("Informe pelo menos um convidado.")
        return attrs


class _AgeAdjustmentSerializer(serializers.Serializer):
    age_group = serializers.CharField()
    count = serializers.IntegerField()
    price_per_person = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class _AppliedSurchargeSerializer(serializers.Serializer):
    description = serializers.CharField()
    surcharge_type = serializers.CharField()
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    applied_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class BudgetCalculationSerializer(serializers.Serializer):
    service_id = serializers.IntegerField()
    service_name = serializers.CharField()
    base_price_per_guest = serializers.DecimalField(max_digits=12, decimal_places=2)
    tier_id = serializers.IntegerField(allow_null=True)
    age_adjustments = _AgeAdjustmentSerializer(many=True)
    date_surcharges = _AppliedSurchargeSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    befest_fee = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
