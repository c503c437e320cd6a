import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

from apps.reservations.domain import errors
from apps.reservations.domain.entities import ContactDetails, Reservation

GUESTS = 16


def _attempt(manager, barrier, offset):
    start = date(2050, 3, 1) + timedelta(days=offset % 3)
    candidate = Reservation(
        room_id=1,
        start_date=start,
        end_date=start + timedelta(days=3),
        contact=ContactDetails(
            first_name=f"Guest{offset}",
            last_name="Racer",
            email=f"guest{offset}@example.com",
            phone="555-0100",
        ),
    )
    barrier.wait()
    try:
        return manager.commit_reservation(candidate)
    except errors.ConflictError as exc:
        return exc


def test_exactly_one_concurrent_overlapping_commit_wins(repository, manager):
    barrier = threading.Barrier(GUESTS)

    with ThreadPoolExecutor(max_workers=GUESTS) as pool:
        results = list(pool.map(lambda i: _attempt(manager, barrier, i), range(GUESTS)))

    winners = [r for r in results if isinstance(r, int)]
    conflicts = [r for r in results if isinstance(r, errors.ConflictError)]
    assert len(winners) == 1
    assert len(conflicts) == GUESTS - 1
    assert len(repository.reservations) == 1
    assert [r.reservation_id for r in repository.restrictions.values()] == winners


def test_concurrent_commits_on_different_rooms_all_succeed(repository, manager):
    barrier = threading.Barrier(2)

    def book(room_id):
        barrier.wait()
        return manager.commit_owner_block(room_id, date(2050, 3, 1), date(2050, 3, 4))

    with ThreadPoolExecutor(max_workers=2) as pool:
        blocks = list(pool.map(book, [1, 2]))

    assert sorted(block.room_id for block in blocks) == [1, 2]
    assert len(repository.restrictions) == 2
