"""
Domain building blocks shared by the apps

- Entity: identified by its ``id``, timestamps in UTC
- ValueObject: frozen, compared field by field
- Aggregate: entity that records domain events until a unit of work takes them
- DomainEvent: a fact about an aggregate, published after commit

Subclasses are declared with ``@dataclass(kw_only=True, eq=False)`` so that
their own required fields may follow the defaulted base fields and so that
identity-based equality from Entity is inherited.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Entity:
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        return isinstance(other, type(self)) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject:
    """Marker base for immutable values; equality is the dataclass default"""


@dataclass(eq=False)
class Aggregate(Entity):
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Pending events, oldest first (a copy)"""
        return list(self._events)


@dataclass(kw_only=True)
class DomainEvent:
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: UUID | None = None

    def to_dict(self) -> dict:
        """JSON-friendly form used by the audit log"""
        return {
            'event_id': str(self.event_id),
            'event_type': type(self).__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
