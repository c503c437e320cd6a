"""
Availability Query Engine

Answers "which rooms are free" from the restriction calendar. Nothing is
cached: every call reads the current restrictions, which are the only
source of truth for occupancy.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List

from .domain.entities import Room, to_date_range
from .domain.repository import ReservationRepository

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Read-only queries; safe to run concurrently with each other."""

    def __init__(self, repository: ReservationRepository):
        self.repository = repository

    def get_room(self, room_id: int) -> Room:
        return self.repository.get_room(room_id)

    def is_room_free(self, room_id: int, start_date: date, end_date: date) -> bool:
        """
        True iff no restriction of the room overlaps [start_date, end_date)

        Raises:
            ValidationError: start_date is not before end_date
            NotFoundError: the room does not exist
        """
        dates = to_date_range(start_date, end_date)
        self.repository.get_room(room_id)
        return not self.repository.overlapping_restrictions(room_id, dates)

    def search_available_rooms(self, start_date: date, end_date: date) -> List[Room]:
        """
        Every free room for the range, in ascending id order

        Returns an empty list when nothing is free.

        Raises:
            ValidationError: start_date is not before end_date
        """
        dates = to_date_range(start_date, end_date)
        busy = self.repository.busy_room_ids(dates)
        rooms = [room for room in self.repository.list_rooms() if room.id not in busy]
        logger.debug(f"Availability search {dates}: {len(rooms)} free room(s)")
        return rooms
