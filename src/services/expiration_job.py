"""Booking expiration job.

Background job that keeps booking statuses in line with the clock:
- pending bookings left unpaid past the payment window are cancelled and
  their voucher redemption is given back;
- checked-in bookings whose end time has passed become finished.
"""

from datetime import datetime, timedelta
from typing import Callable

from src.logging import get_logger
from src.logging.audit import AuditEventType, AuditLogger
from src.models.booking import BookingStatus
from src.services.availability import utc_now
from src.storage.postgres_booking_repo import PostgresBookingRepository
from src.storage.postgres_voucher_repo import PostgresVoucherRepository

logger = get_logger(__name__)

# Time a customer has to pay before a pending booking is released
PENDING_PAYMENT_TIMEOUT_MINUTES = 30


class BookingExpirationJob:
    """Background job to release unpaid bookings and finish played ones."""

    def __init__(
        self,
        booking_repo: PostgresBookingRepository,
        voucher_repo: PostgresVoucherRepository,
        pending_timeout_minutes: int = PENDING_PAYMENT_TIMEOUT_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize expiration job.

        Args:
            booking_repo: Booking repository for querying and updating bookings
            voucher_repo: Voucher repository for refunding redemptions
            pending_timeout_minutes: Payment window of a pending booking
            clock: Source of the current instant
        """
        self.booking_repo = booking_repo
        self.voucher_repo = voucher_repo
        self.pending_timeout = timedelta(minutes=pending_timeout_minutes)
        self.clock = clock

    async def run(self) -> dict[str, int]:
        """
        Execute expiration job.

        Returns:
            Dictionary with counts: {"cancelled": n, "finished": n, "failed": n}
        """
        logger.debug("expiration_job_started")

        now = self.clock()
        cancelled_count = 0
        finished_count = 0
        failed_count = 0

        expired = await self.booking_repo.get_pending_created_before(now - self.pending_timeout)
        for booking in expired:
            try:
                # update_status commits the flushed refund as well
                if booking.voucher_id:
                    await self.voucher_repo.increment_quantity(booking.voucher_id)
                await self.booking_repo.update_status(booking.id, BookingStatus.CANCELLED)
                cancelled_count += 1

                AuditLogger.log_booking_cancelled(
                    actor_id=None, booking_id=booking.id, reason="payment_timeout"
                )

            except Exception as e:
                failed_count += 1
                await self.booking_repo.rollback()
                logger.error(
                    "booking_expiration_failed",
                    booking_id=str(booking.id),
                    error=str(e),
                    exc_info=True,
                )

        played = await self.booking_repo.get_checked_in_ended_before(now)
        for booking in played:
            try:
                await self.booking_repo.update_status(booking.id, BookingStatus.FINISHED)
                finished_count += 1

                AuditLogger.log_booking_status_changed(
                    AuditEventType.BOOKING_FINISHED,
                    booking_id=booking.id,
                    status=BookingStatus.FINISHED.value,
                )

            except Exception as e:
                failed_count += 1
                await self.booking_repo.rollback()
                logger.error(
                    "booking_finish_failed",
                    booking_id=str(booking.id),
                    error=str(e),
                    exc_info=True,
                )

        result = {"cancelled": cancelled_count, "finished": finished_count, "failed": failed_count}

        if expired or played:
            logger.info("expiration_job_completed", **result)

        return result
