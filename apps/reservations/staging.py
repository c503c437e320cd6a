"""
Reservation Staging Workflow

Carries a guest's draft across the search -> choose room -> confirm steps.
The draft lives in the guest's session only; nothing is written to the
database before confirm() hands it to the BookingTransactionManager, which
re-checks availability itself.

States:
    EMPTY --search--> DATES_CHOSEN --choose_room--> ROOM_CHOSEN
    ROOM_CHOSEN --confirm (success)--> EMPTY
    ROOM_CHOSEN --confirm (conflict)--> DATES_CHOSEN
    any --reset--> EMPTY

The session is always passed in explicitly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from .availability import AvailabilityService
from .domain import errors
from .domain.entities import ContactDetails, Reservation, Room, StagedReservation, StagingState
from .services import BookingTransactionManager

logger = logging.getLogger(__name__)

STAGED_RESERVATION_KEY = "reservation"
RESERVATION_SUMMARY_KEY = "reservation_summary"


class SessionStore(ABC):
    """Key/value storage scoped to one guest session."""

    @abstractmethod
    def get(self, key: str, default=None):
        pass

    @abstractmethod
    def put(self, key: str, value) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class DjangoSessionStore(SessionStore):
    """Adapter over request.session; values must be JSON serializable."""

    def __init__(self, session):
        self.session = session

    def get(self, key: str, default=None):
        return self.session.get(key, default)

    def put(self, key: str, value) -> None:
        self.session[key] = value

    def delete(self, key: str) -> None:
        self.session.pop(key, None)


def reservation_summary(reservation: Reservation, room: Optional[Room]) -> dict:
    contact = reservation.contact
    return {
        "id": reservation.id,
        "room_id": reservation.room_id,
        "room_name": room.name if room else "",
        "start_date": reservation.start_date.isoformat(),
        "end_date": reservation.end_date.isoformat(),
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "email": contact.email,
        "phone": contact.phone,
    }


class ReservationStagingWorkflow:

    def __init__(self, availability: AvailabilityService, manager: BookingTransactionManager):
        self.availability = availability
        self.manager = manager

    def current(self, session: SessionStore) -> Optional[StagedReservation]:
        data = session.get(STAGED_RESERVATION_KEY)
        if not data:
            return None
        try:
            return StagedReservation.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Discarding unreadable staged reservation: {data!r}")
            session.delete(STAGED_RESERVATION_KEY)
            return None

    def state(self, session: SessionStore) -> StagingState:
        staged = self.current(session)
        if staged is None:
            return StagingState.EMPTY
        return staged.state

    def _save(self, session: SessionStore, staged: StagedReservation) -> None:
        session.put(STAGED_RESERVATION_KEY, staged.to_dict())

    def search(self, session: SessionStore, start_date: date, end_date: date) -> List[Room]:
        """Search free rooms and stage the dates; allowed from any state."""
        rooms = self.availability.search_available_rooms(start_date, end_date)
        self._save(session, StagedReservation(
            start_date=start_date,
            end_date=end_date,
            offered_room_ids=[room.id for room in rooms],
        ))
        return rooms

    def choose_room(self, session: SessionStore, room_id: int) -> StagedReservation:
        staged = self.current(session)
        if staged is None:
            raise errors.NoStagedReservationError("Search for availability before choosing a room")
        if room_id not in staged.offered_room_ids:
            raise errors.InvalidSelectionError(f"Room {room_id} was not offered for the selected dates")

        room = self.availability.get_room(room_id)
        staged.room_id = room.id
        staged.room = room
        self._save(session, staged)
        return staged

    def book_room(self, session: SessionStore, room_id: int, start_date: date, end_date: date) -> StagedReservation:
        """
        Stage a specific room straight from its page

        The room is offered only if it is free right now; otherwise the draft
        keeps the dates with nothing offered and ConflictError is raised.
        """
        free = self.availability.is_room_free(room_id, start_date, end_date)
        staged = StagedReservation(start_date=start_date, end_date=end_date)
        if not free:
            self._save(session, staged)
            raise errors.ConflictError(room_id=room_id, start_date=start_date, end_date=end_date)

        staged.offered_room_ids = [room_id]
        self._save(session, staged)
        return self.choose_room(session, room_id)

    def confirm(self, session: SessionStore, contact: ContactDetails) -> Reservation:
        """
        Commit the staged draft with the guest's contact details

        On success the draft is discarded and a summary is kept for
        pop_summary(). On ConflictError the chosen room is dropped from the
        draft so the guest searches again.
        """
        staged = self.current(session)
        if staged is None or staged.state != StagingState.ROOM_CHOSEN:
            raise errors.NoStagedReservationError("Choose a room before confirming the reservation")

        candidate = Reservation(
            room_id=staged.room_id,
            start_date=staged.start_date,
            end_date=staged.end_date,
            contact=contact,
        )
        try:
            reservation_id = self.manager.commit_reservation(candidate)
        except errors.ConflictError:
            rejected = staged.room_id
            staged.clear_room()
            staged.offered_room_ids = [i for i in staged.offered_room_ids if i != rejected]
            self._save(session, staged)
            raise

        candidate.id = reservation_id
        session.delete(STAGED_RESERVATION_KEY)
        session.put(RESERVATION_SUMMARY_KEY, reservation_summary(candidate, staged.room))
        return candidate

    def reset(self, session: SessionStore) -> None:
        session.delete(STAGED_RESERVATION_KEY)

    def pop_summary(self, session: SessionStore) -> Optional[dict]:
        summary = session.get(RESERVATION_SUMMARY_KEY)
        session.delete(RESERVATION_SUMMARY_KEY)
        return summary
