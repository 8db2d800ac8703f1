"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import TimeRange


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """Event: a booking request was admitted and persisted as confirmed"""
    booking_id: UUID
    requester_id: int
    slot_id: int
    period: TimeRange
    total_price: Decimal

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'requester_id': self.requester_id,
            'slot_id': self.slot_id,
            'start': self.period.start.isoformat(),
            'end': self.period.end.isoformat(),
            'total_price': str(self.total_price),
        })
        return data


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """Event: a resident cancelled their booking"""
    booking_id: UUID
    slot_id: int
    cancelled_by: int

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'slot_id': self.slot_id,
            'cancelled_by': self.cancelled_by,
        })
        return data


@dataclass(kw_only=True)
class BookingStatusOverridden(DomainEvent):
    """Event: an administrator overwrote a booking's status"""
    booking_id: UUID
    old_status: str
    new_status: str
    changed_by: int

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'old_status': self.old_status,
            'new_status': self.new_status,
            'changed_by': self.changed_by,
        })
        return data
