"""Parking app package.

Holds the slot inventory: slot numbers, types, statuses and owner
assignments managed by administrators, plus the search for slots that are
free during a time window.
"""
