"""
Helpers for mapping domain enumerations onto Django model fields.

Domain enums are the single source of truth for closed value sets; model
fields derive their `choices` and `max_length` from them.
"""

from enum import Enum
from typing import List, Tuple, Type


def enum_choices(enum_cls: Type[Enum]) -> List[Tuple[str, str]]:
    """Build Django `choices` from an Enum whose values are strings."""
    return [
        (member.value, member.value.replace('_', ' ').capitalize())
        for member in enum_cls
    ]


def enum_max_length(enum_cls: Type[Enum]) -> int:
    """Length of the longest value in the enum"""
    return max(len(member.value) for member in enum_cls)
