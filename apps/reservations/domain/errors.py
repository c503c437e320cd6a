"""
Reservation Engine Errors

Every failure of the availability engine, the transaction manager and the
staging workflow is raised as one of these types so callers can render it.

- ValidationError: malformed input, rejected before any write
- InvalidSelectionError: a room id that was not offered by the last search
- NoStagedReservationError: the session holds no draft for the operation
- NotFoundError: unknown room, reservation or restriction id
- ConflictError: the room is not available for the requested dates
- PersistenceError: the underlying store failed; not retried
"""

from datetime import date
from typing import Optional


class ReservationError(Exception):
    """Base class for reservation engine errors"""


class ValidationError(ReservationError):
    """Raised for malformed input such as unordered dates"""


class InvalidSelectionError(ValidationError):
    """Raised when a guest picks a room that was never offered"""


class NoStagedReservationError(ValidationError):
    """Raised when a staging step needs a draft that the session lacks"""


class NotFoundError(ReservationError):
    """Raised for unknown ids"""


class ConflictError(ReservationError):
    """Raised when the room is busy for the requested dates"""

    def __init__(
        self,
        message: str = "Room is not available for the selected dates",
        *,
        room_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        super().__init__(message)
        self.room_id = room_id
        self.start_date = start_date
        self.end_date = end_date


class PersistenceError(ReservationError):
    """Raised when the store fails; partial writes are rolled back"""
