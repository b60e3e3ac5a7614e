"""Overlap checking between booking windows."""

from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID

from src.models.booking import Booking, BookingStatus


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open [start, end) intersection test. Touching windows do not overlap."""
    return a_start < b_end and a_end > b_start


class BookingLookup(Protocol):
    async def find_overlapping(
        self,
        field_id: UUID,
        start: datetime,
        end: datetime,
        exclude_statuses=...,
        for_update: bool = ...,
    ) -> Optional[Booking]: ...


class OverlapChecker:
    """Finds a non-cancelled booking occupying part of a requested window."""

    EXCLUDED_STATUSES = (BookingStatus.CANCELLED,)

    def __init__(self, booking_repo: BookingLookup):
        self.booking_repo = booking_repo

    async def find_conflict(
        self, field_id: UUID, start: datetime, end: datetime
    ) -> Optional[Booking]:
        """Return any one conflicting booking, or None if the window is free."""
        return await self.booking_repo.find_overlapping(
            field_id, start, end, exclude_statuses=self.EXCLUDED_STATUSES
        )
