"""WSGI config for the condo parking project.

Exposes the WSGI application for use by Django's runserver and production
WSGI servers.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
