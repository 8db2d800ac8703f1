"""Parking slot models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import Slot as SlotSnapshot, SlotStatus, SlotType
from shared.infrastructure.fields import enum_choices, enum_max_length


class Slot(models.Model):
    """A parking slot in the condominium."""

    slot_number = models.CharField(_("Slot number"), max_length=20, unique=True)
    slot_type = models.CharField(
        max_length=enum_max_length(SlotType),
        choices=enum_choices(SlotType),
        default=SlotType.UNCOVERED.value,
    )
    status = models.CharField(
        max_length=enum_max_length(SlotStatus),
        choices=enum_choices(SlotStatus),
        default=SlotStatus.AVAILABLE.value,
    )
    price_per_hour = models.DecimalField(
        _("Price per hour"),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="owned_slots",
        help_text=_("Empty means the slot is shared by all residents."),
    )
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Parking slot")
        verbose_name_plural = _("Parking slots")
        ordering = ["slot_number"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_hour__gt=0),
                name="parking_slot_price_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="parking_slot_status_idx"),
            models.Index(fields=["owner"], name="parking_slot_owner_idx"),
        ]

    def __str__(self) -> str:
        return f"Slot {self.slot_number} ({self.slot_type}, {self.status})"

    def to_domain(self) -> SlotSnapshot:
        return SlotSnapshot(
            id=self.pk,
            slot_number=self.slot_number,
            slot_type=SlotType(self.slot_type),
            status=SlotStatus(self.status),
            price_per_hour=self.price_per_hour,
            owner_id=self.owner_id,
            description=self.description,
        )
