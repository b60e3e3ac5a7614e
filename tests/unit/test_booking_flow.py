"""Unit tests for booking creation, cancellation and check-in."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from src.models.booking import Booking, BookingStatus
from src.models.voucher import Voucher
from src.services.booking_flow import BookingFlowService
from src.services.errors import Forbidden, InvalidRequest, NotFound, SchedulingConflict

TZ = ZoneInfo("Asia/Ho_Chi_Minh")
NOW = datetime(2025, 12, 1, 1, 0, tzinfo=timezone.utc)


def at(hour, minute=0, day=6):
    return datetime(2025, 12, day, hour, minute, tzinfo=TZ)


def make_booking(field_id, account_id=None, status=BookingStatus.PENDING, start=None, **kwargs):
    start = start or at(17)
    return Booking(
        code="251206-AH92",
        field_id=field_id,
        account_id=account_id,
        start_time=start,
        end_time=start + timedelta(hours=1),
        total_price=Decimal("100000"),
        final_price=Decimal("100000"),
        status=status,
        **kwargs,
    )


@pytest.fixture
def service(availability_service, mock_booking_repo, mock_voucher_repo, mock_lock_helper):
    return BookingFlowService(
        availability=availability_service,
        booking_repo=mock_booking_repo,
        voucher_repo=mock_voucher_repo,
        lock_helper=mock_lock_helper,
        clock=lambda: NOW,
    )


@pytest.fixture
def voucher():
    return Voucher(
        code="SUMMER20",
        quantity=5,
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=30),
        discount_percentage=Decimal("20"),
        max_discount_amount=Decimal("50000"),
    )


@pytest.mark.asyncio
async def test_create_booking_success(service, mock_booking_repo, mock_lock_helper, sample_field):
    account_id = uuid4()
    created = make_booking(sample_field.id, account_id)
    mock_booking_repo.insert_if_no_overlap.return_value = created

    booking = await service.create_booking(account_id, sample_field.id, at(17), 60)

    assert booking is created
    mock_lock_helper.acquire_field_lock.assert_called_once_with(sample_field.id)

    booking_input = mock_booking_repo.insert_if_no_overlap.await_args.args[0]
    assert booking_input.field_id == sample_field.id
    assert booking_input.account_id == account_id
    assert booking_input.start_time == at(17)
    assert booking_input.end_time == at(18)
    assert booking_input.total_price == Decimal("100000")
    assert booking_input.final_price == Decimal("100000")
    assert booking_input.status == BookingStatus.PENDING


@pytest.mark.asyncio
async def test_create_booking_lock_busy(service, mock_booking_repo, mock_lock_helper, sample_field):
    mock_lock_helper.acquire_field_lock.return_value.__aenter__ = AsyncMock(return_value=False)

    with pytest.raises(SchedulingConflict):
        await service.create_booking(uuid4(), sample_field.id, at(17), 60)

    mock_booking_repo.insert_if_no_overlap.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_insert_race_is_conflict(service, mock_booking_repo, sample_field):
    """A concurrent writer caught by the database constraint surfaces as a conflict."""
    mock_booking_repo.insert_if_no_overlap.return_value = None

    with pytest.raises(SchedulingConflict):
        await service.create_booking(uuid4(), sample_field.id, at(17), 60)


@pytest.mark.asyncio
async def test_create_booking_rechecks_availability(service, mock_booking_repo, sample_field):
    mock_booking_repo.find_overlapping.return_value = make_booking(sample_field.id)

    with pytest.raises(SchedulingConflict):
        await service.create_booking(uuid4(), sample_field.id, at(17, 30), 60)

    mock_booking_repo.insert_if_no_overlap.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_with_voucher(
    service, mock_booking_repo, mock_voucher_repo, voucher, sample_field
):
    mock_voucher_repo.get_by_code.return_value = voucher
    mock_voucher_repo.decrement_quantity.return_value = True
    mock_booking_repo.insert_if_no_overlap.return_value = make_booking(sample_field.id)

    await service.create_booking(uuid4(), sample_field.id, at(17), 60, voucher_code="SUMMER20")

    mock_voucher_repo.get_by_code.assert_awaited_once_with("SUMMER20", for_update=True)
    mock_voucher_repo.decrement_quantity.assert_awaited_once_with(voucher.id)
    booking_input = mock_booking_repo.insert_if_no_overlap.await_args.args[0]
    assert booking_input.total_price == Decimal("100000")
    assert booking_input.final_price == Decimal("80000")
    assert booking_input.voucher_id == voucher.id


@pytest.mark.asyncio
async def test_create_booking_unknown_voucher(
    service, mock_booking_repo, mock_voucher_repo, sample_field
):
    mock_voucher_repo.get_by_code.return_value = None

    with pytest.raises(NotFound):
        await service.create_booking(uuid4(), sample_field.id, at(17), 60, voucher_code="NOPE")

    mock_booking_repo.insert_if_no_overlap.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_voucher_exhausted(
    service, mock_booking_repo, mock_voucher_repo, voucher, sample_field
):
    mock_voucher_repo.get_by_code.return_value = voucher
    mock_voucher_repo.decrement_quantity.return_value = False

    with pytest.raises(InvalidRequest):
        await service.create_booking(uuid4(), sample_field.id, at(17), 60, voucher_code="SUMMER20")

    mock_booking_repo.insert_if_no_overlap.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_booking_by_owner_refunds_voucher(
    service, mock_booking_repo, mock_voucher_repo, sample_field
):
    account_id = uuid4()
    voucher_id = uuid4()
    booking = make_booking(sample_field.id, account_id, voucher_id=voucher_id)
    mock_booking_repo.get_by_id.return_value = booking

    result = await service.cancel_booking(booking.id, account_id)

    assert result.status == BookingStatus.CANCELLED
    mock_booking_repo.update_status.assert_awaited_once_with(booking.id, BookingStatus.CANCELLED)
    mock_voucher_repo.increment_quantity.assert_awaited_once_with(voucher_id)


@pytest.mark.asyncio
async def test_cancel_booking_by_stranger_forbidden(service, mock_booking_repo, sample_field):
    booking = make_booking(sample_field.id, uuid4())
    mock_booking_repo.get_by_id.return_value = booking

    with pytest.raises(Forbidden):
        await service.cancel_booking(booking.id, uuid4())

    mock_booking_repo.update_status.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_booking_by_admin_allowed(service, mock_booking_repo, sample_field):
    booking = make_booking(sample_field.id, uuid4())
    mock_booking_repo.get_by_id.return_value = booking

    result = await service.cancel_booking(booking.id, uuid4(), is_admin=True)

    assert result.status == BookingStatus.CANCELLED


@pytest.mark.asyncio
async def test_cancel_booking_inside_cutoff_rejected(service, mock_booking_repo, sample_field):
    account_id = uuid4()
    # 08:30 local on the day of NOW (08:00 local)
    booking = make_booking(sample_field.id, account_id, start=at(8, 30, day=1))
    mock_booking_repo.get_by_id.return_value = booking

    with pytest.raises(InvalidRequest):
        await service.cancel_booking(booking.id, account_id)


@pytest.mark.asyncio
async def test_cancel_already_cancelled_rejected(service, mock_booking_repo, sample_field):
    account_id = uuid4()
    mock_booking_repo.get_by_id.return_value = make_booking(
        sample_field.id, account_id, status=BookingStatus.CANCELLED
    )

    with pytest.raises(InvalidRequest):
        await service.cancel_booking(uuid4(), account_id)


@pytest.mark.asyncio
async def test_cancel_unknown_booking(service, mock_booking_repo):
    mock_booking_repo.get_by_id.return_value = None

    with pytest.raises(NotFound):
        await service.cancel_booking(uuid4(), uuid4())


@pytest.mark.asyncio
async def test_check_in_paid_booking(service, mock_booking_repo, sample_field):
    booking = make_booking(sample_field.id, status=BookingStatus.COMPLETED)
    mock_booking_repo.get_by_id.return_value = booking
    mock_booking_repo.update.side_effect = lambda b: b

    result = await service.check_in(booking.id)

    assert result.status == BookingStatus.CHECKED_IN
    assert result.check_in_at == NOW


@pytest.mark.parametrize(
    "status", [BookingStatus.PENDING, BookingStatus.CHECKED_IN, BookingStatus.CANCELLED]
)
@pytest.mark.asyncio
async def test_check_in_requires_completed_status(service, mock_booking_repo, sample_field, status):
    mock_booking_repo.get_by_id.return_value = make_booking(sample_field.id, status=status)

    with pytest.raises(InvalidRequest):
        await service.check_in(uuid4())

    mock_booking_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_counter_booking_is_paid_walk_in(service, mock_booking_repo, mock_voucher_repo, sample_field):
    admin_id = uuid4()
    created = make_booking(sample_field.id, status=BookingStatus.COMPLETED)
    mock_booking_repo.insert_if_no_overlap.return_value = created

    booking = await service.create_admin_booking(
        admin_id, sample_field.id, at(17), 90, customer_phone="0901234567"
    )

    assert booking is created
    booking_input = mock_booking_repo.insert_if_no_overlap.await_args.args[0]
    assert booking_input.status == BookingStatus.COMPLETED
    assert booking_input.account_id is None
    assert booking_input.customer_name == "Walk-in customer"
    assert booking_input.customer_phone == "0901234567"
    assert booking_input.end_time == at(18, 30)
    assert booking_input.total_price == booking_input.final_price == Decimal("150000")
    mock_voucher_repo.decrement_quantity.assert_not_awaited()


@pytest.mark.asyncio
async def test_counter_booking_keeps_given_name(service, mock_booking_repo, sample_field):
    mock_booking_repo.insert_if_no_overlap.return_value = make_booking(sample_field.id)

    await service.create_admin_booking(uuid4(), sample_field.id, at(17), 60, customer_name="Minh")

    booking_input = mock_booking_repo.insert_if_no_overlap.await_args.args[0]
    assert booking_input.customer_name == "Minh"


@pytest.mark.asyncio
async def test_counter_booking_conflict(service, mock_booking_repo, sample_field):
    mock_booking_repo.insert_if_no_overlap.return_value = None

    with pytest.raises(SchedulingConflict):
        await service.create_admin_booking(uuid4(), sample_field.id, at(17), 60)


@pytest.mark.asyncio
async def test_counter_booking_respects_field_lock(service, mock_booking_repo, mock_lock_helper, sample_field):
    mock_lock_helper.acquire_field_lock.return_value.__aenter__ = AsyncMock(return_value=False)

    with pytest.raises(SchedulingConflict):
        await service.create_admin_booking(uuid4(), sample_field.id, at(17), 60)

    mock_booking_repo.insert_if_no_overlap.assert_not_awaited()


@pytest.mark.asyncio
async def test_account_history_page_offset(service, mock_booking_repo, sample_field):
    account_id = uuid4()
    page = [make_booking(sample_field.id, account_id)]
    mock_booking_repo.get_by_account.return_value = (page, 21)

    bookings, total = await service.list_account_bookings(
        account_id, status=BookingStatus.COMPLETED, page=3, limit=10
    )

    assert bookings == page
    assert total == 21
    mock_booking_repo.get_by_account.assert_awaited_once_with(
        account_id, status=BookingStatus.COMPLETED, offset=20, limit=10
    )
