"""Allowed status transitions, checked before any status mutation."""

from typing import Dict, FrozenSet, Mapping

from fastapi import HTTPException, status

from urbanstay.models.booking import BookingStatus
from urbanstay.models.inquiry import InquiryStatus
from urbanstay.models.property import PropertyStatus
from urbanstay.models.review import ReviewStatus

TransitionTable = Mapping[str, FrozenSet[str]]


def _table(rules: Dict[str, tuple]) -> TransitionTable:
    return {src.value: frozenset(dst.value for dst in targets) for src, targets in rules.items()}


INQUIRY_TRANSITIONS: TransitionTable = _table({
    InquiryStatus.PENDING: (
        InquiryStatus.RESPONDED,
        InquiryStatus.SCHEDULED,
        InquiryStatus.CANCELLED,
    ),
    InquiryStatus.RESPONDED: (
        InquiryStatus.SCHEDULED,
        InquiryStatus.COMPLETED,
        InquiryStatus.CANCELLED,
    ),
    InquiryStatus.SCHEDULED: (InquiryStatus.COMPLETED, InquiryStatus.CANCELLED),
    InquiryStatus.COMPLETED: (),
    InquiryStatus.CANCELLED: (),
})

BOOKING_TRANSITIONS: TransitionTable = _table({
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
    BookingStatus.COMPLETED: (),
    BookingStatus.CANCELLED: (),
})

PROPERTY_TRANSITIONS: TransitionTable = _table({
    PropertyStatus.AVAILABLE: (PropertyStatus.SOLD, PropertyStatus.RENTED),
    PropertyStatus.SOLD: (PropertyStatus.AVAILABLE,),
    PropertyStatus.RENTED: (PropertyStatus.AVAILABLE,),
})

REVIEW_TRANSITIONS: TransitionTable = _table({
    ReviewStatus.PENDING: (ReviewStatus.APPROVED, ReviewStatus.REJECTED),
    ReviewStatus.APPROVED: (ReviewStatus.REJECTED,),
    ReviewStatus.REJECTED: (ReviewStatus.APPROVED,),
})


def can_transition(table: TransitionTable, current: str, target: str) -> bool:
    """Re-setting the current status is always allowed (no-op)."""
    if current == target:
        return True
    return target in table.get(current, frozenset())


def ensure_transition(table: TransitionTable, current: str, target: str, entity: str) -> None:
    if not can_transition(table, current, target):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change {entity} status from '{current}' to '{target}'",
        )
