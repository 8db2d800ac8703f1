"""FilterSet for slot listing."""

from __future__ import annotations

import django_filters  # type: ignore

from apps.bookings.domain.entities import SlotStatus, SlotType
from shared.infrastructure.fields import enum_choices

from .models import Slot


class SlotFilterSet(django_filters.FilterSet):
    slot_type = django_filters.ChoiceFilter(choices=enum_choices(SlotType))
    status = django_filters.ChoiceFilter(choices=enum_choices(SlotStatus))
    owner = django_filters.NumberFilter(field_name="owner_id", lookup_expr="exact")
    # shared=true -> slots without an owner
    shared = django_filters.BooleanFilter(field_name="owner", lookup_expr="isnull")

    class Meta:
        model = Slot
        fields = ["slot_type", "status", "owner", "shared"]
