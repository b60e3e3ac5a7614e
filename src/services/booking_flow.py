"""Booking flow service with race condition prevention.

Availability check and insert run as one unit: a per-field Redis lock
serializes writers, the overlap is re-checked with row locks right before
the insert, and the database exclusion constraint rejects whatever slips
past both.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from src.logging import get_logger
from src.logging.audit import AuditEventType, AuditLogger
from src.models.booking import Booking, BookingInput, BookingStatus
from src.services.availability import AvailabilityService, utc_now
from src.services.errors import Forbidden, InvalidRequest, NotFound, SchedulingConflict
from src.services.vouchers import apply_voucher
from src.storage.postgres_booking_repo import PostgresBookingRepository
from src.storage.postgres_voucher_repo import PostgresVoucherRepository
from src.storage.redis_locks import RedisLockHelper

logger = get_logger(__name__)

CANCELLATION_CUTOFF_MINUTES = 60
WALK_IN_CUSTOMER_NAME = "Walk-in customer"


class BookingFlowService:
    """Service for creating, cancelling and checking in bookings."""

    def __init__(
        self,
        availability: AvailabilityService,
        booking_repo: PostgresBookingRepository,
        voucher_repo: PostgresVoucherRepository,
        lock_helper: RedisLockHelper,
        cancellation_cutoff_minutes: int = CANCELLATION_CUTOFF_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize booking flow service."""
        self.availability = availability
        self.booking_repo = booking_repo
        self.voucher_repo = voucher_repo
        self.lock_helper = lock_helper
        self.cancellation_cutoff = timedelta(minutes=cancellation_cutoff_minutes)
        self.clock = clock

    async def create_booking(
        self,
        account_id: Optional[UUID],
        field_id: UUID,
        start_time: datetime,
        duration_minutes: int,
        voucher_code: Optional[str] = None,
    ) -> Booking:
        """
        Create a pending booking after a full availability check.

        Returns:
            The committed booking, with ``final_price`` after voucher discount

        Raises:
            SchedulingConflict: Field locked by another writer, or window taken
            NotFound: Unknown field or voucher
            InvalidRequest: Validation failure (see AvailabilityService), or
                unusable voucher
        """
        async with self.lock_helper.acquire_field_lock(field_id) as acquired:
            if not acquired:
                logger.warning("field_lock_busy", field_id=str(field_id))
                raise SchedulingConflict(
                    "This field is being booked by another customer. Please try again."
                )

            quote = await self.availability.check_availability_and_price(
                field_id, start_time, duration_minutes
            )

            start = self.availability.localize(start_time)
            end = start + timedelta(minutes=duration_minutes)
            total_price = quote.pricing.total_price
            final_price = total_price
            voucher_id = None

            if voucher_code:
                voucher = await self.voucher_repo.get_by_code(voucher_code, for_update=True)
                if voucher is None:
                    raise NotFound("Voucher does not exist.")

                final_price = apply_voucher(voucher, total_price, self.clock())

                if not await self.voucher_repo.decrement_quantity(voucher.id):
                    raise InvalidRequest("Voucher has no redemptions left.")
                voucher_id = voucher.id

            booking = await self.booking_repo.insert_if_no_overlap(
                BookingInput(
                    field_id=field_id,
                    account_id=account_id,
                    start_time=start,
                    end_time=end,
                    total_price=total_price,
                    final_price=final_price,
                    voucher_id=voucher_id,
                    status=BookingStatus.PENDING,
                )
            )

            if booking is None:
                raise SchedulingConflict(
                    "The field has already been booked by someone else for this window."
                )

        AuditLogger.log_booking_created(
            actor_id=account_id,
            booking_id=booking.id,
            field_id=field_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            final_price=float(booking.final_price),
            voucher_code=voucher_code,
        )

        return booking

    async def create_admin_booking(
        self,
        admin_id: UUID,
        field_id: UUID,
        start_time: datetime,
        duration_minutes: int,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
    ) -> Booking:
        """
        Create a paid booking at the counter for a walk-in customer.

        Runs the same lock, availability check and guarded insert as
        ``create_booking``. Vouchers do not apply.

        Raises:
            SchedulingConflict: Field locked by another writer, or window taken
            NotFound: Unknown field
            InvalidRequest: Validation failure (see AvailabilityService)
        """
        async with self.lock_helper.acquire_field_lock(field_id) as acquired:
            if not acquired:
                logger.warning("field_lock_busy", field_id=str(field_id))
                raise SchedulingConflict(
                    "This field is being booked by another customer. Please try again."
                )

            quote = await self.availability.check_availability_and_price(
                field_id, start_time, duration_minutes
            )

            start = self.availability.localize(start_time)
            booking = await self.booking_repo.insert_if_no_overlap(
                BookingInput(
                    field_id=field_id,
                    customer_name=customer_name or WALK_IN_CUSTOMER_NAME,
                    customer_phone=customer_phone,
                    start_time=start,
                    end_time=start + timedelta(minutes=duration_minutes),
                    total_price=quote.pricing.total_price,
                    final_price=quote.pricing.total_price,
                    status=BookingStatus.COMPLETED,
                )
            )

            if booking is None:
                raise SchedulingConflict(
                    "The field has already been booked by someone else for this window."
                )

        AuditLogger.log_booking_created(
            actor_id=admin_id,
            booking_id=booking.id,
            field_id=field_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            final_price=float(booking.final_price),
        )

        return booking

    async def list_account_bookings(
        self,
        account_id: UUID,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """Get one page of the caller's booking history and the total count."""
        return await self.booking_repo.get_by_account(
            account_id, status=status, offset=(page - 1) * limit, limit=limit
        )

    async def cancel_booking(
        self, booking_id: UUID, account_id: UUID, is_admin: bool = False
    ) -> Booking:
        """
        Cancel a booking on behalf of its owner or an admin.

        Raises:
            NotFound: Unknown booking
            Forbidden: Caller is neither owner nor admin
            InvalidRequest: Already cancelled, or too close to the start time
        """
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None:
            raise NotFound("Booking not found.")

        if booking.account_id != account_id and not is_admin:
            AuditLogger.log_permission_denied(
                actor_id=account_id,
                resource_type="booking",
                resource_id=booking_id,
                attempted_action="cancel_booking",
            )
            raise Forbidden("You are not allowed to cancel this booking.")

        if booking.status == BookingStatus.CANCELLED:
            raise InvalidRequest("Booking is already cancelled.")

        if booking.start_time - self.clock() < self.cancellation_cutoff:
            minutes = int(self.cancellation_cutoff.total_seconds() // 60)
            raise InvalidRequest(
                f"Bookings can only be cancelled at least {minutes} minutes before the start time."
            )

        if booking.voucher_id:
            await self.voucher_repo.increment_quantity(booking.voucher_id)

        await self.booking_repo.update_status(booking.id, BookingStatus.CANCELLED)

        AuditLogger.log_booking_cancelled(
            actor_id=account_id, booking_id=booking.id, reason="requested"
        )

        return booking.model_copy(update={"status": BookingStatus.CANCELLED})

    async def check_in(self, booking_id: UUID, actor_id: Optional[UUID] = None) -> Booking:
        """
        Check a customer in at the field.

        Raises:
            NotFound: Unknown booking
            InvalidRequest: Already checked in, or not paid (status != completed)
        """
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found.")

        if booking.status == BookingStatus.CHECKED_IN:
            raise InvalidRequest("This booking has already been checked in.")

        if booking.status != BookingStatus.COMPLETED:
            raise InvalidRequest(
                f'Cannot check in a booking in status "{booking.status.value}". '
                "The booking must be paid first."
            )

        updated = await self.booking_repo.update(
            booking.model_copy(
                update={"status": BookingStatus.CHECKED_IN, "check_in_at": self.clock()}
            )
        )

        AuditLogger.log_booking_status_changed(
            AuditEventType.BOOKING_CHECKED_IN,
            booking_id=booking.id,
            status=BookingStatus.CHECKED_IN.value,
            actor_id=actor_id,
        )

        return updated
