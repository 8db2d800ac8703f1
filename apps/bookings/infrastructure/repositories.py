"""
Django repositories for the booking domain

Translate between ORM rows and domain objects, and translate database
errors into the booking error taxonomy:

- exclusion-constraint violation on insert -> SlotAlreadyBooked
- "start in the past" model validation      -> StartInPast
- any other database error                 -> StorageFailure
"""

from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import DatabaseError, IntegrityError  # type: ignore

from apps.bookings.domain.entities import Booking, BookingStatus, Slot
from apps.bookings.domain.exceptions import (
    InvalidRange,
    SlotAlreadyBooked,
    StartInPast,
    StorageFailure,
)
from apps.bookings.domain.rules import BookingRules
from apps.bookings.models import Booking as BookingModel, OVERLAP_CONSTRAINT_NAME
from apps.parking.models import Slot as SlotModel
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)


class DjangoSlotRepository:
    """Read access to slots"""

    def get(self, slot_id) -> Slot | None:
        try:
            model = SlotModel.objects.filter(pk=slot_id).first()
        except (ValueError, TypeError):
            return None
        except DatabaseError as exc:
            logger.error(f"Failed to load slot {slot_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        return model.to_domain() if model else None


class DjangoBookingRepository:
    """Read/write access to bookings"""

    def get_by_id(self, booking_id: UUID) -> Booking | None:
        try:
            model = BookingModel.objects.filter(pk=booking_id).first()
        except ValidationError:
            # Malformed UUID
            return None
        except DatabaseError as exc:
            logger.error(f"Failed to load booking {booking_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        return model.to_domain() if model else None

    def get_confirmed_for_requester(self, booking_id: UUID, requester_id: int) -> Booking | None:
        try:
            model = BookingModel.objects.filter(
                pk=booking_id,
                requester_id=requester_id,
                status=BookingStatus.CONFIRMED.value,
            ).first()
        except ValidationError:
            return None
        except DatabaseError as exc:
            logger.error(f"Failed to load booking {booking_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        return model.to_domain() if model else None

    def find_overlapping(self, slot_id: int, period: TimeRange) -> List[Booking]:
        """Confirmed bookings of the slot that intersect [start, end)"""
        queryset = BookingModel.objects.filter(
            slot_id=slot_id,
            status=BookingStatus.CONFIRMED.value,
            start_time__lt=period.end,
            end_time__gt=period.start,
        )

        try:
            return [model.to_domain() for model in queryset]
        except DatabaseError as exc:
            logger.error(f"Failed to check overlaps for slot {slot_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc

    def add(self, booking: Booking) -> None:
        model = BookingModel.from_domain(booking)
        try:
            model.save(force_insert=True)
        except ValidationError as exc:
            raise self._rejection_from_validation(booking, exc) from exc
        except IntegrityError as exc:
            if OVERLAP_CONSTRAINT_NAME in str(exc):
                logger.warning(
                    f"Overlap for slot {booking.slot_id} detected by the database "
                    f"after the application check passed"
                )
                raise SlotAlreadyBooked(booking.slot_id) from exc
            logger.error(f"Failed to insert booking {booking.id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        except DatabaseError as exc:
            logger.error(f"Failed to insert booking {booking.id}: {exc}", exc_info=True)
            raise StorageFailure() from exc

        booking.created_at = model.created_at
        booking.updated_at = model.updated_at

    def save(self, booking: Booking) -> None:
        """Persist status changes of an existing booking"""
        try:
            updated = BookingModel.objects.filter(pk=booking.id).update(
                status=booking.status.value,
                notes=booking.notes,
                cancelled_at=booking.cancelled_at,
                updated_at=booking.updated_at,
            )
        except DatabaseError as exc:
            logger.error(f"Failed to update booking {booking.id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        if not updated:
            raise StorageFailure(f"Booking {booking.id} disappeared while being updated")

    @staticmethod
    def _rejection_from_validation(booking: Booking, exc: ValidationError):
        codes = {
            error.code
            for errors in getattr(exc, "error_dict", {}).values()
            for error in errors
        }
        if "start_in_past" in codes:
            rules = BookingRules.from_mapping(getattr(settings, "BOOKING_RULES", None))
            return StartInPast(booking.period.start, rules.past_grace)
        return InvalidRange(booking.period.start, booking.period.end)
