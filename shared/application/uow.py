"""
Unit of Work

One database transaction per command. Domain events collected from the
aggregates touched inside the transaction are handed to the message bus
only once the outermost transaction has committed.
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import Aggregate, DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    ``transaction.atomic()`` plus after-commit event publishing

    An atomic block is not a lock: two units of work reading the same rows
    concurrently both see the state before either commits. Uniqueness that
    must hold across requests belongs in a database constraint.

    Usage:
        with DjangoUnitOfWork() as uow:
            booking_repo.add(booking)
            uow.collect_events(booking)
    """

    def __init__(self):
        self._pending: List[DomainEvent] = []
        self._atomic = transaction.atomic()

    def __enter__(self):
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None and self._pending:
            events = list(self._pending)
            transaction.on_commit(lambda: _publish(events))
        elif self._pending:
            logger.debug(f"Discarding {len(self._pending)} events of a failed unit of work")
        self._pending.clear()
        return self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def collect_events(self, aggregate: Aggregate):
        """Move the aggregate's pending events into this unit of work"""
        events = aggregate.events
        if not events:
            return
        self._pending.extend(events)
        aggregate.clear_events()
        logger.debug(f"Collected {len(events)} events from {aggregate.__class__.__name__} {aggregate.id}")


def _publish(events: List[DomainEvent]):
    from shared.application.message_bus import message_bus

    message_bus.publish_events(events)
