from datetime import date

import pytest

from apps.reservations.domain import errors
from apps.reservations.domain.entities import ContactDetails, StagingState
from apps.reservations.memory import InMemorySessionStore
from apps.reservations.staging import RESERVATION_SUMMARY_KEY, STAGED_RESERVATION_KEY

CONTACT = ContactDetails(
    first_name="John",
    last_name="Smith",
    email="john@smith.com",
    phone="555-555-5555",
)

JAN_1 = date(2050, 1, 1)
JAN_2 = date(2050, 1, 2)


def test_new_session_is_empty(workflow, session):
    assert workflow.state(session) == StagingState.EMPTY
    assert workflow.current(session) is None


def test_search_stages_dates(workflow, session):
    rooms = workflow.search(session, JAN_1, JAN_2)

    staged = workflow.current(session)
    assert [room.id for room in rooms] == [1, 2]
    assert workflow.state(session) == StagingState.DATES_CHOSEN
    assert (staged.start_date, staged.end_date) == (JAN_1, JAN_2)
    assert staged.offered_room_ids == [1, 2]


def test_invalid_search_keeps_previous_draft(workflow, session):
    workflow.search(session, JAN_1, JAN_2)
    workflow.choose_room(session, 1)

    with pytest.raises(errors.ValidationError):
        workflow.search(session, JAN_2, JAN_1)

    assert workflow.state(session) == StagingState.ROOM_CHOSEN


def test_choose_room_requires_search(workflow, session):
    with pytest.raises(errors.NoStagedReservationError):
        workflow.choose_room(session, 1)


def test_choose_room_not_offered(workflow, manager, session):
    manager.commit_owner_block(2, JAN_1, JAN_2)
    workflow.search(session, JAN_1, JAN_2)

    with pytest.raises(errors.InvalidSelectionError):
        workflow.choose_room(session, 2)

    assert workflow.state(session) == StagingState.DATES_CHOSEN


def test_choose_room_stages_room(workflow, session):
    workflow.search(session, JAN_1, JAN_2)

    staged = workflow.choose_room(session, 2)

    assert staged.state == StagingState.ROOM_CHOSEN
    assert staged.room.name == "Major's Suite"
    assert session.get(STAGED_RESERVATION_KEY)["room_id"] == 2


def test_confirm_commits_and_clears_draft(workflow, repository, session):
    workflow.search(session, JAN_1, JAN_2)
    workflow.choose_room(session, 1)

    reservation = workflow.confirm(session, CONTACT)

    assert reservation.id in repository.reservations
    assert workflow.state(session) == StagingState.EMPTY
    summary = session.get(RESERVATION_SUMMARY_KEY)
    assert summary["room_name"] == "General's Quarters"
    assert summary["start_date"] == "2050-01-01"
    assert summary["email"] == "john@smith.com"


def test_confirm_without_room(workflow, session):
    workflow.search(session, JAN_1, JAN_2)

    with pytest.raises(errors.NoStagedReservationError):
        workflow.confirm(session, CONTACT)


def test_conflict_on_confirm_reverts_to_dates_chosen(workflow, manager, repository, session):
    workflow.search(session, JAN_1, JAN_2)
    workflow.choose_room(session, 1)
    # another guest takes the room between choosing and confirming
    manager.commit_owner_block(1, JAN_1, JAN_2)

    with pytest.raises(errors.ConflictError):
        workflow.confirm(session, CONTACT)

    staged = workflow.current(session)
    assert staged.state == StagingState.DATES_CHOSEN
    assert staged.offered_room_ids == [2]
    assert repository.reservations == {}

    workflow.choose_room(session, 2)
    reservation = workflow.confirm(session, CONTACT)
    assert reservation.room_id == 2


def test_book_room_stages_room_directly(workflow, session):
    staged = workflow.book_room(session, 2, JAN_1, JAN_2)

    assert staged.state == StagingState.ROOM_CHOSEN
    assert staged.room_id == 2


def test_book_room_when_busy(workflow, manager, session):
    manager.commit_owner_block(1, JAN_1, JAN_2)

    with pytest.raises(errors.ConflictError):
        workflow.book_room(session, 1, JAN_1, JAN_2)

    staged = workflow.current(session)
    assert staged.state == StagingState.DATES_CHOSEN
    assert staged.offered_room_ids == []


def test_book_room_unknown_room(workflow, session):
    with pytest.raises(errors.NotFoundError):
        workflow.book_room(session, 9, JAN_1, JAN_2)


def test_reset(workflow, session):
    workflow.search(session, JAN_1, JAN_2)

    workflow.reset(session)

    assert workflow.state(session) == StagingState.EMPTY


def test_summary_is_read_once(workflow, session):
    workflow.book_room(session, 1, JAN_1, JAN_2)
    workflow.confirm(session, CONTACT)

    assert workflow.pop_summary(session)["room_id"] == 1
    assert workflow.pop_summary(session) is None


def test_sessions_are_isolated(workflow):
    first, second = InMemorySessionStore(), InMemorySessionStore()
    workflow.search(first, JAN_1, JAN_2)

    assert workflow.state(second) == StagingState.EMPTY


@pytest.mark.parametrize(
    "stored",
    [
        {"end_date": "2050-01-02"},
        {"start_date": "01/01/2050", "end_date": "2050-01-02"},
        "not-a-dict",
    ],
)
def test_unreadable_draft_is_discarded(workflow, session, stored):
    session.put(STAGED_RESERVATION_KEY, stored)

    assert workflow.current(session) is None
    assert workflow.state(session) == StagingState.EMPTY
    assert session.get(STAGED_RESERVATION_KEY) is None


def test_search_replaces_unreadable_draft(workflow, session):
    session.put(STAGED_RESERVATION_KEY, {"start_date": "garbage"})

    workflow.search(session, JAN_1, JAN_2)

    assert workflow.state(session) == StagingState.DATES_CHOSEN
