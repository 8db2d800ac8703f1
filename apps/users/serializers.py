"""Serializers for resident profiles."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.bookings.domain.entities import Role

User = get_user_model()


class ProfileSerializer(serializers.ModelSerializer):
    """Resident profile as seen by its owner and by administrators."""

    display_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "display_name",
            "first_name",
            "last_name",
            "unit_number",
            "phone",
            "vehicle_plate",
            "role",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "role",
            "created_at",
            "updated_at",
        ]


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=[role.value for role in Role])

    def validated_role(self) -> Role:
        return Role(self.validated_data["role"])
