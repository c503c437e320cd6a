"""Wiring of the booking engine onto the database repository."""

from __future__ import annotations

from typing import Optional

from .availability import AvailabilityService
from .domain.repository import ReservationRepository
from .repositories import DjangoReservationRepository
from .services import BookingTransactionManager
from .staging import ReservationStagingWorkflow


def get_repository() -> ReservationRepository:
    return DjangoReservationRepository()


def get_availability_service(repository: Optional[ReservationRepository] = None) -> AvailabilityService:
    return AvailabilityService(repository or get_repository())


def get_transaction_manager(repository: Optional[ReservationRepository] = None) -> BookingTransactionManager:
    return BookingTransactionManager(repository or get_repository())


def get_staging_workflow(repository: Optional[ReservationRepository] = None) -> ReservationStagingWorkflow:
    repository = repository or get_repository()
    return ReservationStagingWorkflow(
        AvailabilityService(repository),
        BookingTransactionManager(repository),
    )
