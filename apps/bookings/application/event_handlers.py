"""
Booking event handlers

Subscribed to the message bus in ``BookingsConfig.ready``. Handlers run
after the transaction commits; a failing handler never undoes the booking.
"""

import logging

from shared.application.message_bus import MessageBus
from apps.bookings.domain.events import BookingCancelled, BookingCreated, BookingStatusOverridden

audit_logger = logging.getLogger('apps.bookings.audit')


def log_booking_event(event) -> None:
    """Write one audit line per booking event"""
    audit_logger.info(f"{event.__class__.__name__} {event.to_dict()}")


def register_event_handlers(bus: MessageBus) -> None:
    for event_type in (BookingCreated, BookingCancelled, BookingStatusOverridden):
        bus.register_event_handler(event_type, log_booking_event)
