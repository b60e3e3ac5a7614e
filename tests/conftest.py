"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from src.models.field import Field
from src.services.availability import AvailabilityService
from src.services.operating_hours import OperatingHoursValidator
from src.services.pricing import PriceResolver

BUSINESS_TZ = ZoneInfo("Asia/Ho_Chi_Minh")
# 2025-12-01 08:00 local
FIXED_NOW = datetime(2025, 12, 1, 1, 0, tzinfo=timezone.utc)


def local(year, month, day, hour, minute=0, second=0):
    """Business-local wall clock instant."""
    return datetime(year, month, day, hour, minute, second, tzinfo=BUSINESS_TZ)


@pytest.fixture
def tz():
    return BUSINESS_TZ


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sample_field():
    """Active field of one field type."""
    return Field(id=uuid4(), name="Field 1", field_type_id=uuid4(), is_active=True)


@pytest.fixture
def mock_field_repo(sample_field):
    repo = AsyncMock()
    repo.get_by_id.return_value = sample_field
    return repo


@pytest.fixture
def mock_booking_repo():
    repo = AsyncMock()
    repo.find_overlapping.return_value = None
    repo.get_by_field_between.return_value = []
    return repo


@pytest.fixture
def mock_time_slot_repo():
    repo = AsyncMock()
    repo.find_matching.return_value = None
    return repo


@pytest.fixture
def mock_voucher_repo():
    return AsyncMock()


@pytest.fixture
def mock_lock_helper():
    """Redis lock helper whose field lock is free."""
    helper = MagicMock()
    helper.acquire_field_lock.return_value.__aenter__ = AsyncMock(return_value=True)
    helper.acquire_field_lock.return_value.__aexit__ = AsyncMock(return_value=None)
    return helper


@pytest.fixture
def availability_service(mock_field_repo, mock_booking_repo, mock_time_slot_repo, fixed_clock):
    """Engine with open_hour=7, close_hour=23 and 1,000 rounding."""
    return AvailabilityService(
        field_repo=mock_field_repo,
        booking_repo=mock_booking_repo,
        price_resolver=PriceResolver(
            mock_time_slot_repo,
            BUSINESS_TZ,
            default_price_per_hour=Decimal("100000"),
            rounding_unit=Decimal("1000"),
        ),
        hours_validator=OperatingHoursValidator(7, 23, BUSINESS_TZ),
        tz=BUSINESS_TZ,
        clock=fixed_clock,
    )
