"""Top-level package for Django configuration.

This package contains the settings modules for the room booking service and
the entry points for WSGI, ASGI and Celery.
"""

# Import the Celery application as soon as Django starts. Without this
# the shared task registry will not be populated.
from .celery import app as celery_app  # noqa: F401
