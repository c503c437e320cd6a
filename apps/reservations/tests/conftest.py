from __future__ import annotations

import pytest

from apps.reservations.availability import AvailabilityService
from apps.reservations.domain.entities import Room
from apps.reservations.memory import InMemoryReservationRepository, InMemorySessionStore
from apps.reservations.services import BookingTransactionManager
from apps.reservations.staging import ReservationStagingWorkflow


@pytest.fixture
def repository() -> InMemoryReservationRepository:
    return InMemoryReservationRepository(
        rooms=[
            Room(id=1, name="General's Quarters"),
            Room(id=2, name="Major's Suite"),
        ]
    )


@pytest.fixture
def availability(repository) -> AvailabilityService:
    return AvailabilityService(repository)


@pytest.fixture
def manager(repository) -> BookingTransactionManager:
    return BookingTransactionManager(repository)


@pytest.fixture
def workflow(availability, manager) -> ReservationStagingWorkflow:
    return ReservationStagingWorkflow(availability, manager)


@pytest.fixture
def session() -> InMemorySessionStore:
    return InMemorySessionStore()
