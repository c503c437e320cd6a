"""
Unit of Work Pattern

Manages database transactions for the reservation engine. A unit of work is
the atomic scope the engine requests around a check-then-insert sequence:
either every write inside it becomes visible, or none does.

Callbacks registered with on_commit() run only after the transaction has
committed successfully.
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from django.db import transaction
from django.db.utils import NotSupportedError

logger = logging.getLogger(__name__)


def lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __init__(self):
        self._callbacks: List[Callable[[], None]] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    def on_commit(self, callback: Callable[[], None]):
        """Register a callback to run once the unit of work has committed"""
        self._callbacks.append(callback)

    def _run_callbacks(self, callbacks: List[Callable[[], None]]):
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                # The data is already committed at this point
                logger.error(f"Error in on_commit callback: {e}", exc_info=True)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps transaction.atomic(). When a lock_queryset is given, its rows are
    locked with SELECT ... FOR UPDATE as the first statement of the
    transaction, which serializes every unit of work locking the same rows.
    The locked rows are available as `locked`.

    Usage:
        rooms = Room.objects.filter(pk=room_id)
        with DjangoUnitOfWork(lock_queryset=rooms) as uow:
            if not uow.locked:
                raise NotFoundError(...)
            # check and write
            uow.on_commit(lambda: logger.info("done"))
        # Transaction commits here
    """

    def __init__(self, lock_queryset=None):
        super().__init__()
        self._lock_queryset = lock_queryset
        self._transaction = None
        self.locked = []

    def __enter__(self):
        """Start database transaction and take the row locks"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        if self._lock_queryset is not None:
            try:
                self.locked = list(lock_queryset_if_possible(self._lock_queryset))
            except BaseException as exc:
                self._transaction.__exit__(type(exc), exc, exc.__traceback__)
                raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """
        Schedule callbacks for after the commit

        transaction.on_commit() runs them only once the outermost
        transaction has committed.
        """
        logger.debug(f"Committing transaction with {len(self._callbacks)} callbacks")

        callbacks = self._callbacks.copy()
        self._callbacks.clear()

        if callbacks:
            transaction.on_commit(lambda: self._run_callbacks(callbacks))

    def rollback(self):
        """Rollback changes and discard callbacks"""
        logger.warning(f"Rolling back transaction, discarding {len(self._callbacks)} callbacks")
        self._callbacks.clear()
