"""Unit tests for the availability and pricing engine."""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from src.models.booking import Booking, BookingStatus
from src.models.time_slot import TimeSlot
from src.services.errors import (
    InvalidRequest,
    NotFound,
    OperatingHoursViolation,
    SchedulingConflict,
)

TZ = ZoneInfo("Asia/Ho_Chi_Minh")


def at(hour, minute=0, day=6):
    return datetime(2025, 12, day, hour, minute, tzinfo=TZ)


def make_booking(field_id, start, end, status=BookingStatus.CONFIRMED):
    return Booking(
        code="251206-AH92",
        field_id=field_id,
        start_time=start,
        end_time=end,
        total_price=Decimal("450000"),
        final_price=Decimal("450000"),
        status=status,
    )


@pytest.mark.asyncio
async def test_scenario_a_quote_in_peak_tier(
    availability_service, mock_time_slot_repo, sample_field
):
    mock_time_slot_repo.find_matching.return_value = TimeSlot(
        field_type_id=sample_field.field_type_id,
        start_time=time(17, 0),
        end_time=time(19, 0),
        price=Decimal("300000"),
    )

    quote = await availability_service.check_availability_and_price(
        sample_field.id, at(17, 30), 90
    )

    assert quote.available is True
    assert quote.field_name == "Field 1"
    assert quote.booking_details.date == "06/12/2025"
    assert quote.booking_details.start_time == "17:30"
    assert quote.booking_details.end_time == "19:00"
    assert quote.booking_details.duration == "90 minutes"
    assert quote.pricing.price_per_hour == Decimal("300000")
    assert quote.pricing.total_price == Decimal("450000")
    assert quote.pricing.currency == "VND"
    assert quote.message == "Field is available and can be booked now."


@pytest.mark.asyncio
async def test_scenario_b_overlap_is_conflict(
    availability_service, mock_booking_repo, sample_field
):
    mock_booking_repo.find_overlapping.return_value = make_booking(
        sample_field.id, at(17), at(18, 30)
    )

    with pytest.raises(SchedulingConflict) as exc_info:
        await availability_service.check_availability_and_price(sample_field.id, at(17, 30), 90)

    assert "17:30 - 19:00" in exc_info.value.message
    assert "17:00 - 18:30" in exc_info.value.message


@pytest.mark.asyncio
async def test_scenario_c_before_opening(availability_service, mock_field_repo, sample_field):
    with pytest.raises(OperatingHoursViolation):
        await availability_service.check_availability_and_price(sample_field.id, at(5), 60)

    # Rejected before any lookup
    mock_field_repo.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_scenario_d_default_rate_when_no_tier(availability_service, sample_field):
    quote = await availability_service.check_availability_and_price(sample_field.id, at(9), 60)

    assert quote.available is True
    assert quote.pricing.price_per_hour == Decimal("100000")
    assert quote.pricing.total_price == Decimal("100000")


@pytest.mark.asyncio
async def test_scenario_e_inactive_field(availability_service, mock_field_repo, sample_field):
    mock_field_repo.get_by_id.return_value = sample_field.model_copy(update={"is_active": False})

    with pytest.raises(InvalidRequest) as exc_info:
        await availability_service.check_availability_and_price(sample_field.id, at(9), 60)

    assert not isinstance(exc_info.value, OperatingHoursViolation)
    assert exc_info.value.message == "This field is temporarily out of service."


@pytest.mark.asyncio
async def test_unknown_field_not_found(availability_service, mock_field_repo):
    mock_field_repo.get_by_id.return_value = None
    field_id = uuid4()

    with pytest.raises(NotFound) as exc_info:
        await availability_service.check_availability_and_price(field_id, at(9), 60)

    assert str(field_id) in exc_info.value.message


@pytest.mark.asyncio
async def test_start_in_past_rejected(availability_service, mock_field_repo, sample_field):
    with pytest.raises(InvalidRequest) as exc_info:
        await availability_service.check_availability_and_price(
            sample_field.id, at(7, day=1), 60
        )

    assert exc_info.value.message == "Cannot book a field in the past."
    mock_field_repo.get_by_id.assert_not_awaited()


@pytest.mark.parametrize("duration", [0, 29, 301, -30])
@pytest.mark.asyncio
async def test_duration_out_of_range_rejected(availability_service, sample_field, duration):
    with pytest.raises(InvalidRequest):
        await availability_service.check_availability_and_price(sample_field.id, at(9), duration)


@pytest.mark.asyncio
async def test_cancelled_bookings_are_excluded_from_conflict_lookup(
    availability_service, mock_booking_repo, sample_field
):
    await availability_service.check_availability_and_price(sample_field.id, at(17), 60)

    kwargs = mock_booking_repo.find_overlapping.await_args.kwargs
    assert kwargs["exclude_statuses"] == (BookingStatus.CANCELLED,)


@pytest.mark.asyncio
async def test_naive_start_is_business_local(
    availability_service, mock_booking_repo, sample_field
):
    quote = await availability_service.check_availability_and_price(
        sample_field.id, datetime(2025, 12, 6, 17, 30), 60
    )

    assert quote.booking_details.start_time == "17:30"
    args = mock_booking_repo.find_overlapping.await_args.args
    assert args[1] == datetime(2025, 12, 6, 10, 30, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_field_schedule_uses_local_day_bounds(
    availability_service, mock_booking_repo, sample_field
):
    booking = make_booking(sample_field.id, at(17), at(18, 30))
    mock_booking_repo.get_by_field_between.return_value = [booking]

    schedule = await availability_service.get_field_schedule(sample_field.id, date(2025, 12, 6))

    mock_booking_repo.get_by_field_between.assert_awaited_once_with(
        sample_field.id, at(0), at(0, day=7)
    )
    assert schedule.field_id == sample_field.id
    assert len(schedule.bookings) == 1
    assert schedule.bookings[0].status == BookingStatus.CONFIRMED


@pytest.mark.asyncio
async def test_field_schedule_unknown_field(availability_service, mock_field_repo):
    mock_field_repo.get_by_id.return_value = None

    with pytest.raises(NotFound):
        await availability_service.get_field_schedule(uuid4(), date(2025, 12, 6))
