"""Serializers for parking slots."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.bookings.application.command_handlers import parse_timestamp
from shared.domain.value_objects import TimeRange

from .models import Slot

User = get_user_model()


class SlotSerializer(serializers.ModelSerializer):
    """Slot with its owner reference; owner is changed through `assign_owner`."""

    owner_id = serializers.ReadOnlyField(source="owner.id")
    owner_unit = serializers.ReadOnlyField(source="owner.unit_number")

    class Meta:
        model = Slot
        fields = [
            "id",
            "slot_number",
            "slot_type",
            "status",
            "price_per_hour",
            "owner_id",
            "owner_unit",
            "description",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "owner_id", "owner_unit", "created_at", "updated_at"]


class OwnerAssignmentSerializer(serializers.Serializer):
    """`owner` is a profile id; null clears the owner and shares the slot."""

    owner = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), allow_null=True)


class AvailabilityQuerySerializer(serializers.Serializer):
    start = serializers.CharField()
    end = serializers.CharField()

    def validate(self, attrs):  # type: ignore
        start = parse_timestamp(attrs["start"])
        end = parse_timestamp(attrs["end"])
        if start is None or end is None:
            raise serializers.ValidationError("start and end must be ISO 8601 timestamps.")
        if end <= start:
            raise serializers.ValidationError("end must be after start.")
        attrs["period"] = TimeRange(start, end)
        return attrs
