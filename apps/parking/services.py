"""Slot availability queries."""

from __future__ import annotations

from django.db.models import Exists, OuterRef, QuerySet  # type: ignore

from apps.bookings.domain.entities import BookingStatus, SlotStatus
from apps.bookings.models import Booking
from shared.domain.value_objects import TimeRange

from .models import Slot


def available_slots(period: TimeRange, queryset: QuerySet | None = None) -> QuerySet:
    """
    Slots that could be booked for ``period``.

    A slot qualifies when its status is available and no confirmed booking
    intersects ``[period.start, period.end)``. Ownership is not considered
    here; the admission decision still applies it.
    """
    if queryset is None:
        queryset = Slot.objects.all()

    overlapping = Booking.objects.filter(
        slot_id=OuterRef("pk"),
        status=BookingStatus.CONFIRMED.value,
        start_time__lt=period.end,
        end_time__gt=period.start,
    )
    return (
        queryset.filter(status=SlotStatus.AVAILABLE.value)
        .annotate(is_taken=Exists(overlapping))
        .filter(is_taken=False)
    )
