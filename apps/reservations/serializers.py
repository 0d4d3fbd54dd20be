"""Serializers for the reservations API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import format_clock

from .domain.entities import ReservationRequest


class ClockTimeField(serializers.Field):
    """Minutes since midnight rendered as "HH:MM"."""

    def to_representation(self, value):
        return format_clock(value)


class ReservationCreateSerializer(serializers.Serializer):
    """Eingabe für eine neue Reservierung.

    Only shapes the payload; the booking service owns every rule, so that
    the API and direct callers reject the same requests the same way.
    """

    resource = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    group = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    start_time = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    end_time = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    bus_destination = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    purpose = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_request(self) -> ReservationRequest:
        return ReservationRequest.from_dict(self.validated_data)


class ReservationSerializer(serializers.Serializer):
    """Reservierung, gelesen aus der Datenbank oder dem Buchungsdienst."""

    id = serializers.IntegerField(read_only=True)
    resource = serializers.CharField(read_only=True)
    category = serializers.SerializerMethodField()
    group = serializers.CharField(read_only=True)
    date = serializers.DateField(read_only=True)
    start_time = ClockTimeField(read_only=True)
    end_time = ClockTimeField(read_only=True)
    bus_destination = serializers.CharField(read_only=True)
    purpose = serializers.CharField(read_only=True)
    user = serializers.CharField(read_only=True)
    username = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)

    def get_category(self, obj) -> str | None:
        category = obj.category
        return category.value if category else None


class ResourceSerializer(serializers.Serializer):
    """Eintrag im Ressourcenkatalog."""

    name = serializers.CharField(read_only=True)
    category = serializers.SerializerMethodField()
    restricted = serializers.BooleanField(read_only=True)
    requires = serializers.SerializerMethodField()

    def get_category(self, obj) -> str:
        return obj.category.value

    def get_requires(self, obj) -> str:
        return "bus_destination" if obj.is_vehicle else "purpose"
