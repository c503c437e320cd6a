from datetime import date

import pytest

from apps.reservations.domain import errors
from apps.reservations.domain.entities import ContactDetails, Reservation, RestrictionKind, Room
from apps.reservations.memory import InMemoryReservationRepository
from apps.reservations.services import BookingTransactionManager

CONTACT = ContactDetails(
    first_name="John",
    last_name="Smith",
    email="john@smith.com",
    phone="555-555-5555",
)


def _candidate(room_id, start, end):
    return Reservation(room_id=room_id, start_date=start, end_date=end, contact=CONTACT)


def test_commit_reservation_writes_reservation_and_restriction(repository, manager):
    reservation_id = manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 4)))

    reservation = repository.get_reservation(reservation_id)
    assert reservation.room_id == 1
    assert reservation.contact == CONTACT
    assert reservation.processed is False

    [restriction] = repository.restrictions.values()
    assert restriction.kind == RestrictionKind.RESERVATION
    assert restriction.reservation_id == reservation_id
    assert (restriction.start_date, restriction.end_date) == (date(2050, 1, 1), date(2050, 1, 4))


def test_non_overlapping_commits_succeed(repository, manager):
    manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 3)))
    manager.commit_reservation(_candidate(1, date(2050, 1, 10), date(2050, 1, 12)))
    manager.commit_reservation(_candidate(2, date(2050, 1, 1), date(2050, 1, 3)))

    assert len(repository.reservations) == 3
    assert len(repository.restrictions) == 3


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2050, 1, 1), date(2050, 1, 5)),  # identical
        (date(2050, 1, 3), date(2050, 1, 8)),  # partial
        (date(2049, 12, 28), date(2050, 1, 2)),  # partial, head
        (date(2050, 1, 2), date(2050, 1, 3)),  # contained
        (date(2049, 12, 1), date(2050, 2, 1)),  # enclosing
    ],
)
def test_overlapping_commit_conflicts(repository, manager, start, end):
    manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 5)))

    with pytest.raises(errors.ConflictError) as excinfo:
        manager.commit_reservation(_candidate(1, start, end))

    assert excinfo.value.room_id == 1
    assert len(repository.reservations) == 1
    assert len(repository.restrictions) == 1


def test_back_to_back_commits_succeed(repository, manager):
    manager.commit_reservation(_candidate(1, date(2050, 1, 3), date(2050, 1, 5)))
    manager.commit_reservation(_candidate(1, date(2050, 1, 5), date(2050, 1, 7)))
    manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 3)))

    assert len(repository.restrictions) == 3


def test_commit_for_unknown_room(repository, manager):
    with pytest.raises(errors.NotFoundError):
        manager.commit_reservation(_candidate(42, date(2050, 1, 1), date(2050, 1, 2)))

    assert repository.reservations == {}


def test_commit_with_unordered_dates(repository, manager):
    with pytest.raises(errors.ValidationError):
        manager.commit_reservation(_candidate(1, date(2050, 1, 2), date(2050, 1, 2)))

    assert repository.reservations == {}


class FailingRestrictionRepository(InMemoryReservationRepository):
    def __init__(self, *args, failures=1, **kwargs):
        super().__init__(*args, **kwargs)
        self.failures = failures

    def add_restriction(self, restriction):
        if self.failures:
            self.failures -= 1
            raise errors.PersistenceError("disk full")
        return super().add_restriction(restriction)


def test_failed_restriction_write_rolls_back_reservation():
    repository = FailingRestrictionRepository(rooms=[Room(id=1, name="General's Quarters")])
    manager = BookingTransactionManager(repository)

    with pytest.raises(errors.PersistenceError):
        manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 2)))

    assert repository.reservations == {}
    assert repository.restrictions == {}


def test_room_is_usable_after_rollback():
    repository = FailingRestrictionRepository(rooms=[Room(id=1, name="General's Quarters")])
    manager = BookingTransactionManager(repository)

    with pytest.raises(errors.PersistenceError):
        manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 2)))

    reservation_id = manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 2)))

    assert list(repository.reservations) == [reservation_id]
    assert len(repository.restrictions) == 1


def test_owner_block_prevents_reservations(repository, manager):
    block = manager.commit_owner_block(1, date(2050, 1, 1), date(2050, 1, 8), reason="Painting")

    assert block.kind == RestrictionKind.OWNER_BLOCK
    assert block.reservation_id is None
    assert block.reason == "Painting"
    with pytest.raises(errors.ConflictError):
        manager.commit_reservation(_candidate(1, date(2050, 1, 7), date(2050, 1, 9)))


def test_owner_block_conflicts_with_reservation(manager):
    manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 3)))

    with pytest.raises(errors.ConflictError):
        manager.commit_owner_block(1, date(2050, 1, 2), date(2050, 1, 4))


def test_cancel_reservation_releases_the_room(repository, manager, availability):
    reservation_id = manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 3)))

    manager.cancel_reservation(reservation_id)

    assert repository.reservations == {}
    assert repository.restrictions == {}
    assert availability.is_room_free(1, date(2050, 1, 1), date(2050, 1, 3))


def test_cancel_unknown_reservation(manager):
    with pytest.raises(errors.NotFoundError):
        manager.cancel_reservation(7)


def test_release_owner_block(repository, manager):
    block = manager.commit_owner_block(1, date(2050, 1, 1), date(2050, 1, 3))

    manager.release_owner_block(block.id)

    assert repository.restrictions == {}


def test_release_owner_block_refuses_reservation_restrictions(repository, manager):
    manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 3)))
    [restriction] = repository.restrictions.values()

    with pytest.raises(errors.ValidationError):
        manager.release_owner_block(restriction.id)

    assert len(repository.restrictions) == 1


def test_mark_processed(repository, manager):
    reservation_id = manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 3)))

    manager.mark_processed(reservation_id)

    assert repository.get_reservation(reservation_id).processed is True


def test_booking_scenario_with_back_to_back_stay(availability, manager):
    rooms = availability.search_available_rooms(date(2050, 1, 1), date(2050, 1, 2))
    assert 1 in [room.id for room in rooms]

    manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 2)))

    with pytest.raises(errors.ConflictError):
        manager.commit_reservation(_candidate(1, date(2050, 1, 1), date(2050, 1, 2)))

    manager.commit_reservation(_candidate(1, date(2050, 1, 2), date(2050, 1, 3)))


def test_zero_length_search_scenario(availability):
    with pytest.raises(errors.ValidationError):
        availability.search_available_rooms(date(2050, 12, 31), date(2050, 12, 31))
