"""
Booking Transaction Manager

The only write path into the restriction calendar. Each operation runs in
one unit of work that is serialized per room, and re-checks availability
inside that scope before writing, so a search result that went stale while
the guest filled in the form can never produce a double booking.
"""

from __future__ import annotations

import logging
from datetime import date

from .domain import errors
from .domain.entities import Reservation, Restriction, RestrictionKind, to_date_range
from .domain.repository import ReservationRepository

logger = logging.getLogger(__name__)


class BookingTransactionManager:

    def __init__(self, repository: ReservationRepository):
        self.repository = repository

    def _ensure_room_is_free(self, room_id: int, start_date: date, end_date: date) -> None:
        """Must be called inside the room's unit of work."""
        dates = to_date_range(start_date, end_date)
        overlapping = self.repository.overlapping_restrictions(room_id, dates)
        if overlapping:
            logger.warning(
                f"Room {room_id} not available for {dates}: "
                f"{len(overlapping)} overlapping restriction(s)"
            )
            raise errors.ConflictError(
                room_id=room_id,
                start_date=start_date,
                end_date=end_date,
            )

    def commit_reservation(self, candidate: Reservation) -> int:
        """
        Commit a reservation and its restriction atomically

        Returns the new reservation id.

        Raises:
            ValidationError: dates are not ordered
            NotFoundError: the room does not exist
            ConflictError: the room is no longer free for the dates
            PersistenceError: the store failed; nothing was written
        """
        dates = to_date_range(candidate.start_date, candidate.end_date)
        logger.info(f"Committing reservation for room {candidate.room_id}, dates {dates}")

        with self.repository.unit_of_work(candidate.room_id) as uow:
            self._ensure_room_is_free(candidate.room_id, candidate.start_date, candidate.end_date)

            reservation = self.repository.add_reservation(candidate)
            self.repository.add_restriction(Restriction(
                room_id=reservation.room_id,
                start_date=reservation.start_date,
                end_date=reservation.end_date,
                kind=RestrictionKind.RESERVATION,
                reservation_id=reservation.id,
            ))

            uow.on_commit(lambda: logger.info(
                f"Reservation {reservation.id} committed for room {reservation.room_id}, dates {dates}"
            ))

        return reservation.id

    def commit_owner_block(
        self,
        room_id: int,
        start_date: date,
        end_date: date,
        reason: str = '',
    ) -> Restriction:
        """
        Block a room for a period without a reservation

        Same checks, serialization and errors as commit_reservation().
        """
        dates = to_date_range(start_date, end_date)
        logger.info(f"Blocking room {room_id} for {dates}")

        with self.repository.unit_of_work(room_id):
            self._ensure_room_is_free(room_id, start_date, end_date)
            restriction = self.repository.add_restriction(Restriction(
                room_id=room_id,
                start_date=start_date,
                end_date=end_date,
                kind=RestrictionKind.OWNER_BLOCK,
                reason=reason,
            ))

        return restriction

    def cancel_reservation(self, reservation_id: int) -> None:
        """Delete a reservation and its restriction in one unit of work"""
        reservation = self.repository.get_reservation(reservation_id)

        with self.repository.unit_of_work(reservation.room_id):
            self.repository.remove_reservation(reservation_id)

        logger.info(f"Reservation {reservation_id} cancelled, room {reservation.room_id} released")

    def release_owner_block(self, restriction_id: int) -> None:
        """
        Delete an owner block

        Raises:
            NotFoundError: unknown restriction
            ValidationError: the restriction belongs to a reservation
        """
        restriction = self.repository.get_restriction(restriction_id)
        if restriction.kind != RestrictionKind.OWNER_BLOCK:
            raise errors.ValidationError(
                "Reservation restrictions are released by cancelling the reservation"
            )

        with self.repository.unit_of_work(restriction.room_id):
            self.repository.remove_restriction(restriction_id)

        logger.info(f"Owner block {restriction_id} on room {restriction.room_id} released")

    def mark_processed(self, reservation_id: int) -> None:
        self.repository.set_processed(reservation_id, True)
