"""Celery tasks for the reservation domain."""

from __future__ import annotations

import logging
from importlib import import_module

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore

logger = logging.getLogger(__name__)


@shared_task(name="reservations.purge_expired_sessions")
def purge_expired_sessions() -> None:
    """
    Delete expired sessions.

    Staged reservations live in the session, so this is what discards the
    drafts of guests who never came back. Runs hourly through Celery Beat.
    """
    engine = import_module(settings.SESSION_ENGINE)
    engine.SessionStore.clear_expired()
    logger.info("Expired sessions purged")
