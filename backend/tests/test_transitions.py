import pytest
from fastapi import HTTPException

from urbanstay.utils.transitions import (
    BOOKING_TRANSITIONS,
    INQUIRY_TRANSITIONS,
    PROPERTY_TRANSITIONS,
    REVIEW_TRANSITIONS,
    can_transition,
    ensure_transition,
)


@pytest.mark.parametrize(
    "table,current,target",
    [
        (INQUIRY_TRANSITIONS, "pending", "responded"),
        (INQUIRY_TRANSITIONS, "responded", "completed"),
        (INQUIRY_TRANSITIONS, "scheduled", "cancelled"),
        (BOOKING_TRANSITIONS, "pending", "confirmed"),
        (BOOKING_TRANSITIONS, "confirmed", "completed"),
        (PROPERTY_TRANSITIONS, "available", "sold"),
        (PROPERTY_TRANSITIONS, "rented", "available"),
        (REVIEW_TRANSITIONS, "rejected", "approved"),
    ],
)
def test_allowed(table, current, target):
    assert can_transition(table, current, target)


@pytest.mark.parametrize(
    "table,current,target",
    [
        (INQUIRY_TRANSITIONS, "completed", "pending"),
        (INQUIRY_TRANSITIONS, "cancelled", "responded"),
        (BOOKING_TRANSITIONS, "pending", "completed"),
        (BOOKING_TRANSITIONS, "completed", "cancelled"),
        (PROPERTY_TRANSITIONS, "sold", "rented"),
        (REVIEW_TRANSITIONS, "approved", "pending"),
    ],
)
def test_rejected(table, current, target):
    assert not can_transition(table, current, target)
    with pytest.raises(HTTPException) as exc:
        ensure_transition(table, current, target, "thing")
    assert exc.value.status_code == 400
    assert f"from '{current}' to '{target}'" in exc.value.detail


def test_same_status_is_a_noop():
    assert can_transition(BOOKING_TRANSITIONS, "completed", "completed")
    ensure_transition(PROPERTY_TRANSITIONS, "sold", "sold", "property")


def test_terminal_states_have_no_exits():
    for status in ("completed", "cancelled"):
        assert INQUIRY_TRANSITIONS[status] == frozenset()
        assert BOOKING_TRANSITIONS[status] == frozenset()
