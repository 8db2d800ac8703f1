"""
Authorization predicates

The single place that decides who may act on a slot or a booking. Used by
the admission decision, the administrative override path and the API
permission classes.
"""

from apps.bookings.domain.entities import Requester, Role, Slot


def is_admin(requester: Requester | None) -> bool:
    return requester is not None and requester.role is Role.ADMIN


def is_owner_or_admin(requester: Requester, slot: Slot) -> bool:
    """True when the requester owns the slot or is an administrator"""
    return is_admin(requester) or (slot.owner_id is not None and slot.owner_id == requester.id)


def can_book_slot(requester: Requester, slot: Slot) -> bool:
    """Unowned slots are open to everyone; owned slots only to owner or admin"""
    if not slot.is_owned:
        return True
    return is_owner_or_admin(requester, slot)
