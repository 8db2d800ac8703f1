"""Bookings app package.

This app encapsulates the booking domain: the admission decision that
accepts or rejects a reservation of a parking slot for a time range,
resident cancellation, and administrative status overrides. Overlap
between confirmed bookings is checked by the application and, on
PostgreSQL, guaranteed by an exclusion constraint.
"""
