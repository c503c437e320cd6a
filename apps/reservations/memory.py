"""
In-memory implementations of the engine's collaborators

InMemoryReservationRepository and InMemorySessionStore hold their state in
process memory. They are used as test doubles and behave like the database
variants: one lock per room serializes units of work, and writes made inside
a failed unit of work are undone.
"""

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Set
import logging
import threading

from shared.application.uow import AbstractUnitOfWork
from shared.domain.value_objects import DateRange
from apps.reservations.domain import errors
from apps.reservations.domain.entities import Reservation, Restriction, Room
from apps.reservations.domain.repository import ReservationRepository
from apps.reservations.staging import SessionStore

logger = logging.getLogger(__name__)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work over InMemoryReservationRepository

    Holds the room lock for its whole lifetime. Every write performed while
    it is active records an undo action; rollback() replays them in reverse.
    """

    def __init__(self, room_lock: threading.Lock):
        super().__init__()
        self._room_lock = room_lock
        self._undo: List[Callable[[], None]] = []

    def __enter__(self):
        self._room_lock.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            self._room_lock.release()

    def record_undo(self, action: Callable[[], None]):
        self._undo.append(action)

    def commit(self):
        callbacks = self._callbacks.copy()
        self._callbacks.clear()
        self._undo.clear()
        self._run_callbacks(callbacks)

    def rollback(self):
        logger.warning(f"Rolling back in-memory unit of work, undoing {len(self._undo)} writes")
        for action in reversed(self._undo):
            action()
        self._undo.clear()
        self._callbacks.clear()


class InMemoryReservationRepository(ReservationRepository):
    """Repository backed by dictionaries; safe to share between threads"""

    def __init__(self, rooms: Optional[List[Room]] = None):
        self._state_lock = threading.RLock()
        self._room_locks: Dict[int, threading.Lock] = {}
        self._local = threading.local()
        self.rooms: Dict[int, Room] = {}
        self.reservations: Dict[int, Reservation] = {}
        self.restrictions: Dict[int, Restriction] = {}
        self._next_reservation_id = 1
        self._next_restriction_id = 1
        for room in rooms or []:
            self.add_room(room)

    def add_room(self, room: Room) -> Room:
        """Provision a room (administrative, outside the engine)"""
        with self._state_lock:
            self.rooms[room.id] = room
            self._room_locks.setdefault(room.id, threading.Lock())
        return room

    def _record_undo(self, action: Callable[[], None]):
        uow = getattr(self._local, 'uow', None)
        if uow is not None:
            uow.record_undo(action)

    # ===== Queries =====

    def get_room(self, room_id: int) -> Room:
        with self._state_lock:
            room = self.rooms.get(room_id)
        if room is None:
            raise errors.NotFoundError(f"Room {room_id} not found")
        return room

    def list_rooms(self) -> List[Room]:
        with self._state_lock:
            return sorted(self.rooms.values(), key=lambda r: r.id)

    def overlapping_restrictions(self, room_id: int, dates: DateRange) -> List[Restriction]:
        with self._state_lock:
            found = [
                r for r in self.restrictions.values()
                if r.room_id == room_id and r.dates.overlaps_with(dates)
            ]
        return sorted(found, key=lambda r: r.start_date)

    def busy_room_ids(self, dates: DateRange) -> Set[int]:
        with self._state_lock:
            return {r.room_id for r in self.restrictions.values() if r.dates.overlaps_with(dates)}

    def restrictions_in_period(self, dates: DateRange) -> List[Restriction]:
        with self._state_lock:
            found = [r for r in self.restrictions.values() if r.dates.overlaps_with(dates)]
        return sorted(found, key=lambda r: (r.room_id, r.start_date))

    def get_reservation(self, reservation_id: int) -> Reservation:
        with self._state_lock:
            reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise errors.NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def get_restriction(self, restriction_id: int) -> Restriction:
        with self._state_lock:
            restriction = self.restrictions.get(restriction_id)
        if restriction is None:
            raise errors.NotFoundError(f"Restriction {restriction_id} not found")
        return restriction

    # ===== Unit of work =====

    @contextmanager
    def unit_of_work(self, room_id: int) -> Iterator[InMemoryUnitOfWork]:
        with self._state_lock:
            room_lock = self._room_locks.get(room_id)
        if room_lock is None:
            raise errors.NotFoundError(f"Room {room_id} not found")

        with InMemoryUnitOfWork(room_lock) as uow:
            self._local.uow = uow
            try:
                yield uow
            finally:
                self._local.uow = None

    # ===== Writes =====

    def add_reservation(self, reservation: Reservation) -> Reservation:
        with self._state_lock:
            stored = replace(
                reservation,
                id=self._next_reservation_id,
                created_at=datetime.now(timezone.utc),
            )
            self._next_reservation_id += 1
            self.reservations[stored.id] = stored
        self._record_undo(lambda: self._discard(self.reservations, stored.id))
        return stored

    def add_restriction(self, restriction: Restriction) -> Restriction:
        with self._state_lock:
            stored = replace(restriction, id=self._next_restriction_id)
            self._next_restriction_id += 1
            self.restrictions[stored.id] = stored
        self._record_undo(lambda: self._discard(self.restrictions, stored.id))
        return stored

    def remove_reservation(self, reservation_id: int) -> None:
        with self._state_lock:
            reservation = self.reservations.pop(reservation_id, None)
            if reservation is None:
                raise errors.NotFoundError(f"Reservation {reservation_id} not found")
            owned = [r for r in self.restrictions.values() if r.reservation_id == reservation_id]
            for restriction in owned:
                del self.restrictions[restriction.id]
        self._record_undo(lambda: self._restore(self.reservations, reservation))
        for restriction in owned:
            self._record_undo(lambda r=restriction: self._restore(self.restrictions, r))

    def remove_restriction(self, restriction_id: int) -> None:
        with self._state_lock:
            restriction = self.restrictions.pop(restriction_id, None)
        if restriction is None:
            raise errors.NotFoundError(f"Restriction {restriction_id} not found")
        self._record_undo(lambda: self._restore(self.restrictions, restriction))

    def set_processed(self, reservation_id: int, processed: bool = True) -> None:
        with self._state_lock:
            reservation = self.reservations.get(reservation_id)
            if reservation is None:
                raise errors.NotFoundError(f"Reservation {reservation_id} not found")
            self.reservations[reservation_id] = replace(reservation, processed=processed)
        self._record_undo(lambda: self._restore(self.reservations, reservation))

    def _discard(self, table: dict, key: int):
        with self._state_lock:
            table.pop(key, None)

    def _restore(self, table: dict, entity):
        with self._state_lock:
            table[entity.id] = entity


class InMemorySessionStore(SessionStore):
    """Session store over a plain dict, one instance per session"""

    def __init__(self, data: Optional[dict] = None):
        self.data = data if data is not None else {}

    def get(self, key: str, default=None):
        return self.data.get(key, default)

    def put(self, key: str, value) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
