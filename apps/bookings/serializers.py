"""Serializers for the booking API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.entities import BookingStatus

from .models import Booking

OVERRIDE_STATUSES = [
    BookingStatus.CANCELLED.value,
    BookingStatus.COMPLETED.value,
    BookingStatus.NO_SHOW.value,
]


class BookingCreateSerializer(serializers.Serializer):
    """
    Booking request.

    Timestamps are kept as strings here; parsing them is part of the
    admission decision so malformed values are rejected as an invalid range.
    """

    slot_id = serializers.IntegerField()
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class BookingSerializer(serializers.ModelSerializer):
    """Booking with the display attributes of its slot."""

    requester_id = serializers.ReadOnlyField(source="requester.id")
    slot_id = serializers.ReadOnlyField(source="slot.id")
    slot_number = serializers.ReadOnlyField(source="slot.slot_number")
    slot_type = serializers.ReadOnlyField(source="slot.slot_type")

    class Meta:
        model = Booking
        fields = [
            "id",
            "requester_id",
            "slot_id",
            "slot_number",
            "slot_type",
            "start_time",
            "end_time",
            "status",
            "total_price",
            "notes",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OVERRIDE_STATUSES)

    def validated_status(self) -> BookingStatus:
        return BookingStatus(self.validated_data["status"])
