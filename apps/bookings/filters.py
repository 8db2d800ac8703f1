"""FilterSet for booking listing."""

from __future__ import annotations

import django_filters  # type: ignore

from apps.bookings.domain.entities import BookingStatus
from shared.infrastructure.fields import enum_choices

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=enum_choices(BookingStatus))
    slot = django_filters.NumberFilter(field_name="slot_id")
    requester = django_filters.NumberFilter(field_name="requester_id")
    start_after = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="gte")
    start_before = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="lt")

    class Meta:
        model = Booking
        fields = ["status", "slot", "requester", "start_after", "start_before"]
