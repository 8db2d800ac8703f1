"""
Booking rejections and storage failures

Every ``BookingRejected`` is an expected, user-facing outcome of a booking
command: the request was well understood and refused for a business reason.
``StorageFailure`` is the only system failure; clients may retry it later.
"""

from datetime import datetime, timedelta


def _hours(value: timedelta) -> str:
    hours = value.total_seconds() / 3600
    return f"{hours:g} hour(s)"


class BookingRejected(Exception):
    """Base class for business rejections of booking commands"""

    code = 'rejected'

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {'code': self.code, 'detail': self.message}


class InvalidRange(BookingRejected):
    code = 'invalid_range'

    def __init__(self, start=None, end=None, reason: str = "end_time must be after start_time"):
        super().__init__(reason, start=start, end=end)
        self.start = start
        self.end = end


class DurationOutOfBounds(BookingRejected):
    code = 'duration_out_of_bounds'

    def __init__(self, duration: timedelta, minimum: timedelta, maximum: timedelta):
        if duration < minimum:
            message = f"Minimum booking duration is {_hours(minimum)}"
        else:
            message = f"Maximum booking duration is {_hours(maximum)}"
        super().__init__(message, duration=duration, minimum=minimum, maximum=maximum)
        self.duration = duration
        self.minimum = minimum
        self.maximum = maximum


class TooFarInAdvance(BookingRejected):
    code = 'too_far_in_advance'

    def __init__(self, start: datetime, max_advance: timedelta):
        super().__init__(
            f"Cannot book more than {max_advance.days} days in advance",
            start=start,
            max_advance=max_advance,
        )
        self.start = start
        self.max_advance = max_advance


class StartInPast(BookingRejected):
    code = 'start_in_past'

    def __init__(self, start: datetime, grace: timedelta):
        super().__init__(
            f"Cannot book in the past (start must be at most {_hours(grace)} ago)",
            start=start,
            grace=grace,
        )
        self.start = start
        self.grace = grace


class SlotNotFound(BookingRejected):
    code = 'slot_not_found'

    def __init__(self, slot_id):
        super().__init__(f"Slot {slot_id} not found", slot_id=slot_id)
        self.slot_id = slot_id


class SlotUnavailable(BookingRejected):
    code = 'slot_unavailable'

    def __init__(self, slot_id, status):
        status_value = getattr(status, 'value', status)
        super().__init__(f"Slot is currently {status_value}", slot_id=slot_id, status=status_value)
        self.slot_id = slot_id
        self.status = status_value


class SlotReservedForOther(BookingRejected):
    code = 'slot_reserved_for_other'

    def __init__(self, slot_id):
        super().__init__("This slot is reserved for another resident", slot_id=slot_id)
        self.slot_id = slot_id


class SlotAlreadyBooked(BookingRejected):
    code = 'slot_already_booked'

    def __init__(self, slot_id, conflicting_ids=()):
        super().__init__(
            "Slot is already booked for this time period",
            slot_id=slot_id,
            conflicting_ids=tuple(conflicting_ids),
        )
        self.slot_id = slot_id
        self.conflicting_ids = tuple(conflicting_ids)


class NotFound(BookingRejected):
    code = 'not_found'

    def __init__(self, booking_id):
        super().__init__(f"Booking {booking_id} not found", booking_id=booking_id)
        self.booking_id = booking_id


class TooLateToCancel(BookingRejected):
    code = 'too_late_to_cancel'

    def __init__(self, booking_id, start: datetime, grace: timedelta):
        super().__init__(
            f"Cannot cancel bookings that started more than {_hours(grace)} ago",
            booking_id=booking_id,
            start=start,
            grace=grace,
        )
        self.booking_id = booking_id
        self.start = start
        self.grace = grace


class StorageFailure(Exception):
    """The store could not complete a read or write"""

    code = 'storage_failure'

    def __init__(self, message: str = "Storage is temporarily unavailable"):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'code': self.code, 'detail': self.message}
