"""
Booking Domain Entities

Core business entities for the parking booking domain:
- Role, SlotType, SlotStatus, BookingStatus: closed value sets
- Requester: who is asking (identity + role)
- Slot: read-only snapshot of a parking slot used for admission
- Booking: aggregate representing a reservation of a slot for a time range
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from shared.domain.base import Aggregate
from shared.domain.value_objects import TimeRange


class Role(Enum):
    RESIDENT = 'resident'
    ADMIN = 'admin'


class SlotType(Enum):
    COVERED = 'covered'
    UNCOVERED = 'uncovered'
    VISITOR = 'visitor'


class SlotStatus(Enum):
    AVAILABLE = 'available'
    MAINTENANCE = 'maintenance'
    RESERVED = 'reserved'


class BookingStatus(Enum):
    """
    Booking Status

    State transitions:
    - (new) -> CONFIRMED (admission accepted)
    - CONFIRMED -> CANCELLED (resident, within grace period; or admin)
    - CONFIRMED -> COMPLETED (admin)
    - CONFIRMED -> NO_SHOW (admin)
    Admins may overwrite the status of any booking.
    """
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'
    NO_SHOW = 'no_show'


@dataclass(frozen=True)
class Requester:
    """Authenticated user on whose behalf a command runs"""
    id: int
    role: Role = Role.RESIDENT


@dataclass(frozen=True)
class Slot:
    """Parking slot as seen by the admission decision"""
    id: int
    slot_number: str
    slot_type: SlotType
    status: SlotStatus
    price_per_hour: Decimal
    owner_id: int | None = None
    description: str = ''

    @property
    def is_available(self) -> bool:
        return self.status is SlotStatus.AVAILABLE

    @property
    def is_owned(self) -> bool:
        return self.owner_id is not None


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    A resident's reservation of one slot for a half-open time range.

    Key invariants:
    - period.end is strictly after period.start (enforced by TimeRange)
    - only CONFIRMED bookings occupy the slot
    """

    requester_id: int
    slot_id: int
    period: TimeRange
    total_price: Decimal
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: str = ''
    cancelled_at: datetime | None = None

    @classmethod
    def admit(cls, requester: Requester, slot: Slot, period: TimeRange, notes: str = '') -> 'Booking':
        """Create a confirmed booking priced at the slot's hourly rate"""
        from apps.bookings.domain.events import BookingCreated
        from apps.bookings.domain.pricing import booking_price

        booking = cls(
            requester_id=requester.id,
            slot_id=slot.id,
            period=period,
            total_price=booking_price(slot.price_per_hour, period),
            notes=notes or '',
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            requester_id=requester.id,
            slot_id=slot.id,
            period=period,
            total_price=booking.total_price,
        ))
        return booking

    def cancel(self, at: datetime, cancelled_by: int):
        """
        Cancel booking (CONFIRMED -> CANCELLED)

        Grace-period rules are checked by the caller; this only guards the
        state transition.
        """
        if self.status is not BookingStatus.CONFIRMED:
            raise ValueError(
                f"Cannot cancel booking with status {self.status.value}"
            )

        from apps.bookings.domain.events import BookingCancelled

        self.status = BookingStatus.CANCELLED
        self.cancelled_at = at
        self.updated_at = at

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            slot_id=self.slot_id,
            cancelled_by=cancelled_by,
        ))

    def override_status(self, status: BookingStatus, at: datetime, changed_by: int):
        """Administrative overwrite of the status, without lifecycle checks"""
        from apps.bookings.domain.events import BookingStatusOverridden

        old_status = self.status
        self.status = status
        self.updated_at = at
        if status is BookingStatus.CANCELLED and self.cancelled_at is None:
            self.cancelled_at = at

        self.add_event(BookingStatusOverridden(
            aggregate_id=self.id,
            booking_id=self.id,
            old_status=old_status.value,
            new_status=status.value,
            changed_by=changed_by,
        ))

    def blocks_slot(self) -> bool:
        """Only confirmed bookings occupy the slot"""
        return self.status is BookingStatus.CONFIRMED

    def conflicts_with(self, period: TimeRange) -> bool:
        return self.blocks_slot() and self.period.overlaps_with(period)

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, slot_id={self.slot_id}, "
            f"status={self.status.value}, period={self.period!r})"
        )
