"""Top-level package for Django configuration.

This package holds the settings modules for the condo parking service and
the WSGI/ASGI entry points.
"""
