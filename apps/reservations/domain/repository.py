"""
Reservation Repository Interface

The engine depends only on this interface. Two implementations exist:
DjangoReservationRepository (apps.reservations.repositories) for the real
database and InMemoryReservationRepository (apps.reservations.memory) as a
test double.
"""

from abc import ABC, abstractmethod
from typing import ContextManager, List, Set

from shared.application.uow import AbstractUnitOfWork
from shared.domain.value_objects import DateRange
from apps.reservations.domain.entities import Reservation, Restriction, Room


class ReservationRepository(ABC):

    @abstractmethod
    def get_room(self, room_id: int) -> Room:
        """Raises NotFoundError for unknown ids"""

    @abstractmethod
    def list_rooms(self) -> List[Room]:
        """All rooms in ascending id order"""

    @abstractmethod
    def overlapping_restrictions(self, room_id: int, dates: DateRange) -> List[Restriction]:
        """Restrictions of one room overlapping the half-open range"""

    @abstractmethod
    def busy_room_ids(self, dates: DateRange) -> Set[int]:
        """Ids of rooms holding at least one restriction overlapping the range"""

    @abstractmethod
    def restrictions_in_period(self, dates: DateRange) -> List[Restriction]:
        """Every restriction overlapping the range, ordered by room then start"""

    @abstractmethod
    def unit_of_work(self, room_id: int) -> ContextManager[AbstractUnitOfWork]:
        """
        Atomic scope serialized per room

        Raises NotFoundError on entry if the room does not exist. Writes made
        inside the scope are rolled back if it exits with an exception.
        """

    @abstractmethod
    def add_reservation(self, reservation: Reservation) -> Reservation:
        """Store a reservation, returning a copy with id and created_at set"""

    @abstractmethod
    def add_restriction(self, restriction: Restriction) -> Restriction:
        """Store a restriction, returning a copy with id set"""

    @abstractmethod
    def get_reservation(self, reservation_id: int) -> Reservation:
        """Raises NotFoundError for unknown ids"""

    @abstractmethod
    def get_restriction(self, restriction_id: int) -> Restriction:
        """Raises NotFoundError for unknown ids"""

    @abstractmethod
    def remove_reservation(self, reservation_id: int) -> None:
        """Delete a reservation together with its restriction"""

    @abstractmethod
    def remove_restriction(self, restriction_id: int) -> None:
        """Delete a single restriction"""

    @abstractmethod
    def set_processed(self, reservation_id: int, processed: bool = True) -> None:
        """Raises NotFoundError for unknown ids"""
