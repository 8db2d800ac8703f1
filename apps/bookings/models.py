"""Booking persistence models."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import Booking as BookingAggregate, BookingStatus
from apps.bookings.domain.pricing import booking_price
from apps.bookings.domain.rules import BookingRules
from shared.domain.value_objects import TimeRange
from shared.infrastructure.fields import enum_choices, enum_max_length

# Name of the PostgreSQL exclusion constraint added by migration 0002.
OVERLAP_CONSTRAINT_NAME = "booking_no_overlap_per_slot"


class Booking(models.Model):
    """Reservation of a parking slot for a half-open time range."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    slot = models.ForeignKey(
        "parking.Slot",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=enum_max_length(BookingStatus),
        choices=enum_choices(BookingStatus),
        default=BookingStatus.CONFIRMED.value,
    )
    # Computed from the slot rate, never accepted from clients
    total_price = models.DecimalField(max_digits=10, decimal_places=2, editable=False)
    notes = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_valid_range",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gt=0),
                name="booking_price_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["slot", "start_time", "end_time"], name="booking_slot_period_idx"),
            models.Index(fields=["requester", "status"], name="booking_requester_status_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for slot {self.slot_id} ({self.status})"

    def clean(self) -> None:
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({
                "end_time": ValidationError(_("End time must be after start time."), code="invalid_range"),
            })

        # New bookings may start at most PAST_GRACE_HOURS ago
        if self._state.adding and self.start_time:
            rules = BookingRules.from_mapping(getattr(settings, "BOOKING_RULES", None))
            if self.start_time < timezone.now() - rules.past_grace:
                raise ValidationError({
                    "start_time": ValidationError(_("Cannot book in the past."), code="start_in_past"),
                })

        if self.total_price is None and self.slot_id and self.start_time and self.end_time:
            self.total_price = booking_price(
                self.slot.price_per_hour,
                TimeRange(self.start_time, self.end_time),
            )

    def save(self, *args, **kwargs):  # type: ignore
        with transaction.atomic():
            self.clean()
            super().save(*args, **kwargs)

    # --- Domain mapping -------------------------------------------------------
    def to_domain(self) -> BookingAggregate:
        return BookingAggregate(
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            requester_id=self.requester_id,
            slot_id=self.slot_id,
            period=TimeRange(self.start_time, self.end_time),
            total_price=self.total_price,
            status=BookingStatus(self.status),
            notes=self.notes,
            cancelled_at=self.cancelled_at,
        )

    @classmethod
    def from_domain(cls, booking: BookingAggregate) -> "Booking":
        return cls(
            id=booking.id,
            requester_id=booking.requester_id,
            slot_id=booking.slot_id,
            start_time=booking.period.start,
            end_time=booking.period.end,
            total_price=booking.total_price,
            status=booking.status.value,
            notes=booking.notes,
            cancelled_at=booking.cancelled_at,
        )
