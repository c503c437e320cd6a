from datetime import date

import pytest

from apps.reservations.domain import errors

JAN_1 = date(2050, 1, 1)
JAN_2 = date(2050, 1, 2)
JAN_3 = date(2050, 1, 3)
JAN_5 = date(2050, 1, 5)


def test_room_without_restrictions_is_free(availability):
    assert availability.is_room_free(1, JAN_1, JAN_2) is True


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (JAN_1, JAN_3, False),  # identical
        (JAN_2, JAN_5, False),  # partial, tail
        (date(2049, 12, 30), JAN_2, False),  # partial, head
        (JAN_2, JAN_3, False),  # contained
        (date(2049, 12, 1), date(2050, 2, 1), False),  # enclosing
        (JAN_3, JAN_5, True),  # starts on checkout day
        (date(2049, 12, 30), JAN_1, True),  # ends on arrival day
    ],
)
def test_is_room_free_against_existing_block(availability, manager, start, end, expected):
    manager.commit_owner_block(1, JAN_1, JAN_3)

    assert availability.is_room_free(1, start, end) is expected


def test_restrictions_of_other_rooms_are_ignored(availability, manager):
    manager.commit_owner_block(2, JAN_1, JAN_3)

    assert availability.is_room_free(1, JAN_1, JAN_3) is True


@pytest.mark.parametrize("start, end", [(JAN_1, JAN_1), (JAN_2, JAN_1)])
def test_is_room_free_rejects_unordered_dates(availability, start, end):
    with pytest.raises(errors.ValidationError):
        availability.is_room_free(1, start, end)


def test_is_room_free_unknown_room(availability):
    with pytest.raises(errors.NotFoundError):
        availability.is_room_free(99, JAN_1, JAN_2)


def test_is_room_free_checks_dates_before_room(availability):
    with pytest.raises(errors.ValidationError):
        availability.is_room_free(99, JAN_2, JAN_1)


def test_is_room_free_is_idempotent(availability, manager):
    manager.commit_owner_block(1, JAN_2, JAN_3)

    first = availability.is_room_free(1, JAN_1, JAN_5)
    second = availability.is_room_free(1, JAN_1, JAN_5)

    assert first is second is False


def test_search_returns_every_free_room_in_id_order(availability):
    rooms = availability.search_available_rooms(JAN_1, JAN_2)

    assert [room.id for room in rooms] == [1, 2]
    assert rooms[0].name == "General's Quarters"


def test_search_excludes_busy_rooms(availability, manager):
    manager.commit_owner_block(1, JAN_1, JAN_5)

    rooms = availability.search_available_rooms(JAN_2, JAN_3)

    assert [room.id for room in rooms] == [2]


def test_search_includes_back_to_back_rooms(availability, manager):
    manager.commit_owner_block(1, JAN_1, JAN_3)

    rooms = availability.search_available_rooms(JAN_3, JAN_5)

    assert [room.id for room in rooms] == [1, 2]


def test_search_with_nothing_free_returns_empty_list(availability, manager):
    manager.commit_owner_block(1, JAN_1, JAN_5)
    manager.commit_owner_block(2, JAN_1, JAN_5)

    assert availability.search_available_rooms(JAN_2, JAN_3) == []


def test_search_rejects_zero_length_range(availability):
    with pytest.raises(errors.ValidationError):
        availability.search_available_rooms(date(2050, 12, 31), date(2050, 12, 31))


def test_search_rejects_reversed_range(availability):
    with pytest.raises(errors.ValidationError):
        availability.search_available_rooms(JAN_3, JAN_1)
