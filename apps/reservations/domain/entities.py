"""
Reservation Domain Entities

Plain dataclasses exchanged between the engine and its repository.
Ids are None until the repository has stored the entity.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from shared.domain.value_objects import DateRange
from apps.reservations.domain import errors


def to_date_range(start_date: date, end_date: date) -> DateRange:
    """Build a DateRange, raising ValidationError for unordered dates"""
    if start_date is None or end_date is None:
        raise errors.ValidationError("Start and end dates are required")
    try:
        return DateRange(start_date, end_date)
    except ValueError as exc:
        raise errors.ValidationError(str(exc)) from exc


class RestrictionKind(str, Enum):
    RESERVATION = "reservation"
    OWNER_BLOCK = "owner_block"


class StagingState(str, Enum):
    EMPTY = "empty"
    DATES_CHOSEN = "dates_chosen"
    ROOM_CHOSEN = "room_chosen"


@dataclass(frozen=True)
class Room:
    id: int
    name: str


@dataclass(frozen=True)
class ContactDetails:
    first_name: str
    last_name: str
    email: str
    phone: str


@dataclass
class Restriction:
    """An occupied interval for a room"""
    room_id: int
    start_date: date
    end_date: date
    kind: RestrictionKind
    reservation_id: Optional[int] = None
    reason: str = ''
    id: Optional[int] = None

    @property
    def dates(self) -> DateRange:
        return to_date_range(self.start_date, self.end_date)


@dataclass
class Reservation:
    """A reservation; committed once the repository has assigned an id"""
    room_id: int
    start_date: date
    end_date: date
    contact: ContactDetails
    processed: bool = False
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    @property
    def dates(self) -> DateRange:
        return to_date_range(self.start_date, self.end_date)


@dataclass
class StagedReservation:
    """
    A guest's draft, held in the session between requests

    offered_room_ids are the rooms returned by the most recent search;
    only those may be chosen.
    """
    start_date: date
    end_date: date
    room_id: Optional[int] = None
    room: Optional[Room] = None
    offered_room_ids: List[int] = field(default_factory=list)

    @property
    def state(self) -> StagingState:
        if self.room_id is None:
            return StagingState.DATES_CHOSEN
        return StagingState.ROOM_CHOSEN

    def clear_room(self):
        self.room_id = None
        self.room = None

    def to_dict(self) -> dict:
        """Session-safe representation (JSON types only)"""
        return {
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'room_id': self.room_id,
            'room_name': self.room.name if self.room else None,
            'offered_room_ids': list(self.offered_room_ids),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'StagedReservation':
        room_id = data.get('room_id')
        room = None
        if room_id is not None:
            room = Room(id=room_id, name=data.get('room_name') or '')
        return cls(
            start_date=date.fromisoformat(data['start_date']),
            end_date=date.fromisoformat(data['end_date']),
            room_id=room_id,
            room=room,
            offered_room_ids=list(data.get('offered_room_ids') or []),
        )
