"""
Booking Command Handlers

These are the use cases for the booking domain. Each handler receives its
collaborators (repositories, rules, clock) explicitly and the requester as
part of the command; none of them reads ambient request state.

Commands:
- CreateBookingCommand: admission decision for a new booking
- CancelBookingCommand: resident cancellation within the grace period
- OverrideBookingStatusCommand: administrative status overwrite
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID
import logging

from django.utils.dateparse import parse_datetime

from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import utcnow
from shared.domain.value_objects import TimeRange
from apps.bookings.domain.entities import Booking, BookingStatus, Requester, Slot
from apps.bookings.domain.exceptions import (
    BookingRejected,
    InvalidRange,
    NotFound,
    SlotAlreadyBooked,
    SlotNotFound,
    SlotReservedForOther,
    SlotUnavailable,
)
from apps.bookings.domain.policies import can_book_slot, is_admin
from apps.bookings.domain.rules import DEFAULT_RULES, BookingRules

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    start_time/end_time may be aware datetimes or ISO 8601 strings; naive
    values are read as UTC.
    """
    requester: Requester
    slot_id: int
    start_time: datetime | str
    end_time: datetime | str
    notes: str = ''


@dataclass
class CancelBookingCommand:
    requester: Requester
    booking_id: UUID


@dataclass
class OverrideBookingStatusCommand:
    """Admin-only overwrite of a booking's status"""
    requester: Requester
    booking_id: UUID
    status: BookingStatus


@dataclass(frozen=True)
class Admission:
    """Accepted booking together with the slot it occupies"""
    booking: Booking
    slot: Slot


class AdminRequired(Exception):
    """Raised when a non-admin issues an admin-only command"""


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO 8601 string or pass through a datetime; None if unparseable"""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
        except ValueError:
            return None
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command (the admission decision)

    Validation sequence, each step short-circuiting with its own rejection:
    1. start/end parse and end > start          -> InvalidRange
    2. min <= duration <= max                   -> DurationOutOfBounds
    3. start - now <= max advance               -> TooFarInAdvance
    4. slot exists and is available             -> SlotNotFound / SlotUnavailable
    5. owned slot: requester is owner or admin  -> SlotReservedForOther
    6. no confirmed booking overlaps [start, end) -> SlotAlreadyBooked

    The overlap read and the insert are separate round-trips with no lock
    between them. Two concurrent requests can both pass step 6; the store's
    exclusion constraint rejects the second insert, which the repository
    reports as SlotAlreadyBooked.
    """

    def __init__(
        self,
        slot_repo,
        booking_repo,
        rules: BookingRules = DEFAULT_RULES,
        clock: Clock = utcnow,
        uow_factory=DjangoUnitOfWork,
    ):
        self.slot_repo = slot_repo
        self.booking_repo = booking_repo
        self.rules = rules
        self.clock = clock
        self.uow_factory = uow_factory

    def handle(self, command: CreateBookingCommand) -> Admission:
        """
        Handle booking creation

        Returns: Admission with the confirmed booking and its slot

        Raises:
            BookingRejected: a subclass naming the failed rule
            StorageFailure: the store could not be read or written
        """
        logger.info(
            f"Booking request from requester {command.requester.id} for slot {command.slot_id}, "
            f"{command.start_time} - {command.end_time}"
        )
        try:
            admission = self._admit(command)
        except BookingRejected as exc:
            logger.info(
                f"Booking request for slot {command.slot_id} rejected: {exc.code} ({exc.message})"
            )
            raise

        logger.info(
            f"Booking {admission.booking.id} confirmed for slot {admission.slot.slot_number}, "
            f"total {admission.booking.total_price}"
        )
        return admission

    def _admit(self, command: CreateBookingCommand) -> Admission:
        now = self.clock()
        period = self._parse_period(command.start_time, command.end_time)

        self.rules.check_duration(period)
        self.rules.check_advance(period, now)

        slot = self.slot_repo.get(command.slot_id)
        if slot is None:
            raise SlotNotFound(command.slot_id)
        if not slot.is_available:
            raise SlotUnavailable(slot.id, slot.status)

        if not can_book_slot(command.requester, slot):
            raise SlotReservedForOther(slot.id)

        with self.uow_factory() as uow:
            conflicts = self.booking_repo.find_overlapping(slot.id, period)
            if conflicts:
                raise SlotAlreadyBooked(slot.id, [b.id for b in conflicts])

            booking = Booking.admit(command.requester, slot, period, command.notes)
            self.booking_repo.add(booking)
            uow.collect_events(booking)

        return Admission(booking=booking, slot=slot)

    @staticmethod
    def _parse_period(start_value, end_value) -> TimeRange:
        start = parse_timestamp(start_value)
        end = parse_timestamp(end_value)
        if start is None or end is None:
            raise InvalidRange(start_value, end_value, reason="start_time and end_time must be ISO 8601 timestamps")
        if end <= start:
            raise InvalidRange(start, end)
        return TimeRange(start, end)


class CancelBookingHandler:
    """Handler for resident cancellation"""

    def __init__(
        self,
        booking_repo,
        rules: BookingRules = DEFAULT_RULES,
        clock: Clock = utcnow,
        uow_factory=DjangoUnitOfWork,
    ):
        self.booking_repo = booking_repo
        self.rules = rules
        self.clock = clock
        self.uow_factory = uow_factory

    def handle(self, command: CancelBookingCommand) -> Booking:
        """
        Cancel the requester's own confirmed booking

        Raises:
            NotFound: no confirmed booking with that id belongs to the requester
            TooLateToCancel: the booking started more than the grace period ago
        """
        logger.info(f"Cancelling booking {command.booking_id} for requester {command.requester.id}")
        now = self.clock()

        try:
            with self.uow_factory() as uow:
                booking = self.booking_repo.get_confirmed_for_requester(
                    command.booking_id, command.requester.id
                )
                if booking is None:
                    raise NotFound(command.booking_id)

                self.rules.check_cancellation(booking.id, booking.period, now)

                booking.cancel(at=now, cancelled_by=command.requester.id)
                self.booking_repo.save(booking)
                uow.collect_events(booking)
        except BookingRejected as exc:
            logger.info(f"Cancellation of booking {command.booking_id} rejected: {exc.code}")
            raise

        logger.info(f"Booking {booking.id} cancelled")
        return booking


class OverrideBookingStatusHandler:
    """Handler for administrative status overwrites"""

    def __init__(self, booking_repo, clock: Clock = utcnow, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo
        self.clock = clock
        self.uow_factory = uow_factory

    def handle(self, command: OverrideBookingStatusCommand) -> Booking:
        if not is_admin(command.requester):
            raise AdminRequired("Only administrators can change booking status")

        logger.info(
            f"Admin {command.requester.id} setting booking {command.booking_id} "
            f"to {command.status.value}"
        )
        with self.uow_factory() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id)
            if booking is None:
                raise NotFound(command.booking_id)

            booking.override_status(command.status, at=self.clock(), changed_by=command.requester.id)
            self.booking_repo.save(booking)
            uow.collect_events(booking)

        return booking
