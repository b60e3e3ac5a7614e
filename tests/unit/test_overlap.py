"""Unit tests for booking overlap detection."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.models.booking import BookingStatus
from src.services.overlap import OverlapChecker, intervals_overlap


def at(hour, minute=0):
    return datetime(2025, 12, 6, hour, minute, tzinfo=timezone.utc)


WINDOWS = [
    (at(10), at(11)),
    (at(10, 30), at(11, 30)),
    (at(11), at(12)),
    (at(9), at(13)),
    (at(10), at(10, 30)),
    (at(12), at(13)),
]


@pytest.mark.parametrize("a", WINDOWS)
@pytest.mark.parametrize("b", WINDOWS)
def test_overlap_is_symmetric(a, b):
    assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)


def test_touching_windows_do_not_overlap():
    assert intervals_overlap(at(10), at(11), at(11), at(12)) is False
    assert intervals_overlap(at(11), at(12), at(10), at(11)) is False


def test_partial_overlap_detected():
    # Existing [17:00, 18:30) against requested [17:30, 19:00)
    assert intervals_overlap(at(17), at(18, 30), at(17, 30), at(19)) is True


def test_containment_detected():
    assert intervals_overlap(at(9), at(13), at(10), at(11)) is True


def test_identical_windows_overlap():
    assert intervals_overlap(at(10), at(11), at(10), at(11)) is True


@pytest.mark.asyncio
async def test_checker_excludes_cancelled_bookings():
    repo = AsyncMock()
    repo.find_overlapping.return_value = None
    field_id = uuid4()

    result = await OverlapChecker(repo).find_conflict(field_id, at(10), at(11))

    assert result is None
    repo.find_overlapping.assert_awaited_once_with(
        field_id, at(10), at(11), exclude_statuses=(BookingStatus.CANCELLED,)
    )


@pytest.mark.asyncio
async def test_checker_returns_conflicting_booking():
    repo = AsyncMock()
    conflict = object()
    repo.find_overlapping.return_value = conflict

    result = await OverlapChecker(repo).find_conflict(uuid4(), at(10), at(10) + timedelta(hours=1))

    assert result is conflict
