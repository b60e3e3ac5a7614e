"""Unit tests for booking and time slot models."""

from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.models.booking import Booking, BookingStatus
from src.models.quote import PricingDetails
from src.models.time_slot import TimeSlot

START = datetime(2025, 12, 6, 10, 0, tzinfo=timezone.utc)


def make_booking(**overrides):
    data = dict(
        code="251206-AH92",
        field_id=uuid4(),
        start_time=START,
        end_time=START + timedelta(hours=1),
        total_price=Decimal("100000"),
        final_price=Decimal("100000"),
    )
    data.update(overrides)
    return Booking(**data)


def test_new_booking_is_pending():
    assert make_booking().status == BookingStatus.PENDING


def test_end_must_follow_start():
    with pytest.raises(ValidationError):
        make_booking(end_time=START)


def test_code_length_enforced():
    with pytest.raises(ValidationError):
        make_booking(code="ABC")


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        make_booking(final_price=Decimal("-1"))


@pytest.mark.parametrize("status", [s for s in BookingStatus if s != BookingStatus.CANCELLED])
def test_every_live_status_blocks_field(status):
    assert make_booking(status=status).blocks_field is True


def test_cancelled_booking_frees_field():
    assert make_booking(status=BookingStatus.CANCELLED).blocks_field is False


def test_time_slot_band_must_be_ordered():
    with pytest.raises(ValidationError):
        TimeSlot(
            field_type_id=uuid4(),
            start_time=time(19, 0),
            end_time=time(17, 0),
            price=Decimal("300000"),
        )


def test_pricing_amounts_serialize_as_numbers():
    pricing = PricingDetails(
        price_per_hour=Decimal("300000"), total_price=Decimal("112500.50"), currency="VND"
    )

    data = pricing.model_dump(mode="json")

    assert data["price_per_hour"] == 300000
    assert isinstance(data["price_per_hour"], int)
    assert data["total_price"] == 112500.5
