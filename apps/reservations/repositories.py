"""ORM-backed implementation of the reservation repository."""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Iterator, List, Set

from django.db import DatabaseError, IntegrityError  # type: ignore
from django.db.models import Q  # type: ignore

from apps.rooms.models import NO_OVERLAP_CONSTRAINT
from apps.rooms.models import Room as RoomModel
from apps.rooms.models import RoomRestriction as RoomRestrictionModel
from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange

from .domain import errors
from .domain.entities import ContactDetails, Reservation, Restriction, RestrictionKind, Room
from .domain.repository import ReservationRepository
from .models import Reservation as ReservationModel

logger = logging.getLogger(__name__)


def _overlap_filter(dates: DateRange) -> Q:
    return Q(start_date__lt=dates.end_date) & Q(end_date__gt=dates.start_date)


def _translate_database_error(exc: DatabaseError) -> errors.ReservationError:
    if isinstance(exc, IntegrityError) and NO_OVERLAP_CONSTRAINT in str(exc):
        return errors.ConflictError()
    logger.error(f"Database failure in reservation repository: {exc}", exc_info=True)
    return errors.PersistenceError("The reservation store is unavailable, please try again.")


def _database_errors_translated(method):
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            raise _translate_database_error(exc) from exc

    return wrapper


def _to_room(model: RoomModel) -> Room:
    return Room(id=model.pk, name=model.name)


def _to_restriction(model: RoomRestrictionModel) -> Restriction:
    return Restriction(
        id=model.pk,
        room_id=model.room_id,
        start_date=model.start_date,
        end_date=model.end_date,
        kind=RestrictionKind(model.kind),
        reservation_id=model.reservation_id,
        reason=model.reason,
    )


def _to_reservation(model: ReservationModel) -> Reservation:
    return Reservation(
        id=model.pk,
        room_id=model.room_id,
        start_date=model.start_date,
        end_date=model.end_date,
        contact=ContactDetails(
            first_name=model.first_name,
            last_name=model.last_name,
            email=model.email,
            phone=model.phone,
        ),
        processed=model.processed,
        created_at=model.created_at,
    )


class DjangoReservationRepository(ReservationRepository):
    """
    Repository over the rooms and reservations tables

    unit_of_work() locks the room row with SELECT ... FOR UPDATE, so every
    commit for the same room waits for the previous one to finish. On
    PostgreSQL the exclusion constraint on room_restriction rejects any
    overlap that bypasses this path; its violation surfaces as ConflictError.
    """

    @_database_errors_translated
    def get_room(self, room_id: int) -> Room:
        try:
            return _to_room(RoomModel.objects.get(pk=room_id))
        except RoomModel.DoesNotExist:
            raise errors.NotFoundError(f"Room {room_id} not found")

    @_database_errors_translated
    def list_rooms(self) -> List[Room]:
        return [_to_room(room) for room in RoomModel.objects.order_by("id")]

    @_database_errors_translated
    def overlapping_restrictions(self, room_id: int, dates: DateRange) -> List[Restriction]:
        qs = RoomRestrictionModel.objects.filter(room_id=room_id).filter(_overlap_filter(dates))
        return [_to_restriction(r) for r in qs.order_by("start_date")]

    @_database_errors_translated
    def busy_room_ids(self, dates: DateRange) -> Set[int]:
        qs = RoomRestrictionModel.objects.filter(_overlap_filter(dates))
        return set(qs.values_list("room_id", flat=True).distinct())

    @_database_errors_translated
    def restrictions_in_period(self, dates: DateRange) -> List[Restriction]:
        qs = RoomRestrictionModel.objects.filter(_overlap_filter(dates))
        return [_to_restriction(r) for r in qs.order_by("room_id", "start_date")]

    @contextmanager
    def unit_of_work(self, room_id: int) -> Iterator[DjangoUnitOfWork]:
        try:
            with DjangoUnitOfWork(lock_queryset=RoomModel.objects.filter(pk=room_id)) as uow:
                if not uow.locked:
                    raise errors.NotFoundError(f"Room {room_id} not found")
                yield uow
        except DatabaseError as exc:
            raise _translate_database_error(exc) from exc

    @_database_errors_translated
    def add_reservation(self, reservation: Reservation) -> Reservation:
        contact = reservation.contact
        model = ReservationModel.objects.create(
            room_id=reservation.room_id,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
            phone=contact.phone,
            processed=reservation.processed,
        )
        return _to_reservation(model)

    @_database_errors_translated
    def add_restriction(self, restriction: Restriction) -> Restriction:
        model = RoomRestrictionModel.objects.create(
            room_id=restriction.room_id,
            start_date=restriction.start_date,
            end_date=restriction.end_date,
            kind=restriction.kind.value,
            reservation_id=restriction.reservation_id,
            reason=restriction.reason,
        )
        return _to_restriction(model)

    @_database_errors_translated
    def get_reservation(self, reservation_id: int) -> Reservation:
        try:
            return _to_reservation(ReservationModel.objects.get(pk=reservation_id))
        except ReservationModel.DoesNotExist:
            raise errors.NotFoundError(f"Reservation {reservation_id} not found")

    @_database_errors_translated
    def get_restriction(self, restriction_id: int) -> Restriction:
        try:
            return _to_restriction(RoomRestrictionModel.objects.get(pk=restriction_id))
        except RoomRestrictionModel.DoesNotExist:
            raise errors.NotFoundError(f"Restriction {restriction_id} not found")

    @_database_errors_translated
    def remove_reservation(self, reservation_id: int) -> None:
        RoomRestrictionModel.objects.filter(reservation_id=reservation_id).delete()
        deleted, _ = ReservationModel.objects.filter(pk=reservation_id).delete()
        if not deleted:
            raise errors.NotFoundError(f"Reservation {reservation_id} not found")

    @_database_errors_translated
    def remove_restriction(self, restriction_id: int) -> None:
        deleted, _ = RoomRestrictionModel.objects.filter(pk=restriction_id).delete()
        if not deleted:
            raise errors.NotFoundError(f"Restriction {restriction_id} not found")

    @_database_errors_translated
    def set_processed(self, reservation_id: int, processed: bool = True) -> None:
        updated = ReservationModel.objects.filter(pk=reservation_id).update(processed=processed)
        if not updated:
            raise errors.NotFoundError(f"Reservation {reservation_id} not found")
