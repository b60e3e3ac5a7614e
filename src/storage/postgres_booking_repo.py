"""PostgreSQL repository for Booking entities."""

import secrets
from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.logging import get_logger
from src.models.booking import Booking, BookingInput, BookingStatus
from src.storage.db_models import BookingTable
from src.storage.repository_base import RepositoryBase

logger = get_logger(__name__)

OVERLAP_CONSTRAINT = "excl_bookings_field_overlap"
_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


class PostgresBookingRepository(RepositoryBase[Booking]):
    """Booking repository using PostgreSQL."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[Booking]:
        """Retrieve booking by ID."""
        db_booking = await self.session.get(BookingTable, id)
        if not db_booking:
            return None
        return self._to_domain_model(db_booking)

    async def find_overlapping(
        self,
        field_id: UUID,
        start: datetime,
        end: datetime,
        exclude_statuses: Iterable[BookingStatus] = (BookingStatus.CANCELLED,),
        for_update: bool = False,
    ) -> Optional[Booking]:
        """
        Find any booking of a field whose window intersects [start, end).

        Args:
            field_id: Field to scan
            start: Requested window start
            end: Requested window end
            exclude_statuses: Statuses that never block the field
            for_update: Lock the matching rows until the transaction ends

        Returns:
            One conflicting booking, or None
        """
        stmt = (
            select(BookingTable)
            .where(BookingTable.field_id == field_id)
            .where(BookingTable.start_time < end)
            .where(BookingTable.end_time > start)
        )
        excluded = list(exclude_statuses)
        if excluded:
            stmt = stmt.where(BookingTable.status.notin_(excluded))
        stmt = stmt.limit(1)
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        db_booking = result.scalar_one_or_none()

        if not db_booking:
            return None

        return self._to_domain_model(db_booking)

    async def create(self, entity: BookingInput) -> Booking:
        """Insert a booking with a fresh customer-facing code."""
        db_booking = BookingTable(
            code=self._generate_booking_code(),
            field_id=entity.field_id,
            account_id=entity.account_id,
            customer_name=entity.customer_name,
            customer_phone=entity.customer_phone,
            start_time=entity.start_time,
            end_time=entity.end_time,
            total_price=entity.total_price,
            final_price=entity.final_price,
            voucher_id=entity.voucher_id,
            status=entity.status,
        )

        self.session.add(db_booking)
        await self.session.flush()

        return self._to_domain_model(db_booking)

    async def insert_if_no_overlap(self, entity: BookingInput) -> Optional[Booking]:
        """
        Re-check the window and insert in the current transaction.

        Overlapping rows are read with FOR UPDATE. A concurrent insert that the
        row locks cannot see is rejected by the exclusion constraint; both
        cases return None and leave the transaction usable.

        Returns:
            The committed booking, or None if the window is taken
        """
        conflict = await self.find_overlapping(
            entity.field_id, entity.start_time, entity.end_time, for_update=True
        )
        if conflict:
            logger.warning(
                "booking_overlap_on_commit",
                field_id=str(entity.field_id),
                conflicting_booking_id=str(conflict.id),
            )
            return None

        try:
            async with self.session.begin_nested():
                booking = await self.create(entity)
        except IntegrityError as e:
            if OVERLAP_CONSTRAINT not in str(e.orig):
                raise
            logger.warning(
                "booking_overlap_rejected_by_constraint",
                field_id=str(entity.field_id),
                start_time=entity.start_time.isoformat(),
                end_time=entity.end_time.isoformat(),
            )
            return None

        await self.session.commit()

        logger.info(
            "booking_inserted",
            booking_id=str(booking.id),
            code=booking.code,
            field_id=str(entity.field_id),
            final_price=float(entity.final_price),
        )

        return booking

    async def update(self, entity: Booking) -> Booking:
        """Update status and check-in time of a booking."""
        db_booking = await self.session.get(BookingTable, entity.id)
        if not db_booking:
            raise ValueError(f"Booking not found: {entity.id}")

        db_booking.status = entity.status
        db_booking.check_in_at = entity.check_in_at

        await self.session.flush()
        await self.session.commit()

        logger.info("booking_updated", booking_id=str(entity.id), status=entity.status.value)

        return self._to_domain_model(db_booking)

    async def update_status(self, booking_id: UUID, status: BookingStatus) -> bool:
        """Set the status of a booking."""
        stmt = (
            update(BookingTable)
            .where(BookingTable.id == booking_id)
            .values(status=status, updated_at=datetime.now(timezone.utc))
        )
        result = await self.session.execute(stmt)
        await self.session.commit()

        updated = result.rowcount > 0
        if updated:
            logger.info("booking_status_updated", booking_id=str(booking_id), status=status.value)
        return updated

    async def rollback(self) -> None:
        """Discard uncommitted changes of the current transaction."""
        await self.session.rollback()

    async def delete(self, id: UUID) -> bool:
        """Delete booking by ID."""
        db_booking = await self.session.get(BookingTable, id)
        if not db_booking:
            return False

        await self.session.delete(db_booking)
        await self.session.flush()
        await self.session.commit()

        logger.info("booking_deleted", booking_id=str(id))

        return True

    async def get_pending_created_before(self, cutoff: datetime) -> list[Booking]:
        """Get pending bookings whose payment window has lapsed."""
        stmt = (
            select(BookingTable)
            .where(BookingTable.status == BookingStatus.PENDING)
            .where(BookingTable.created_at < cutoff)
            .order_by(BookingTable.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [self._to_domain_model(b) for b in result.scalars().all()]

    async def get_checked_in_ended_before(self, now: datetime) -> list[Booking]:
        """Get checked-in bookings whose play time is over."""
        stmt = (
            select(BookingTable)
            .where(BookingTable.status == BookingStatus.CHECKED_IN)
            .where(BookingTable.end_time < now)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain_model(b) for b in result.scalars().all()]

    async def get_by_field_between(
        self, field_id: UUID, start: datetime, end: datetime
    ) -> list[Booking]:
        """Get non-cancelled bookings of a field intersecting [start, end), earliest first."""
        stmt = (
            select(BookingTable)
            .where(BookingTable.field_id == field_id)
            .where(BookingTable.status != BookingStatus.CANCELLED)
            .where(BookingTable.start_time < end)
            .where(BookingTable.end_time > start)
            .order_by(BookingTable.start_time.asc())
        )
        result = await self.session.execute(stmt)
        return [self._to_domain_model(b) for b in result.scalars().all()]

    async def get_by_account(
        self,
        account_id: UUID,
        status: Optional[BookingStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """
        Get one page of an account's bookings, newest first.

        Returns:
            The page and the total number of matching bookings
        """
        conditions = [BookingTable.account_id == account_id]
        if status is not None:
            conditions.append(BookingTable.status == status)

        count_stmt = select(func.count()).select_from(BookingTable).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(BookingTable)
            .where(*conditions)
            .order_by(BookingTable.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain_model(b) for b in result.scalars().all()], total

    def _generate_booking_code(self) -> str:
        """Generate booking code in format YYMMDD-XXXX."""
        date_prefix = datetime.now(timezone.utc).strftime("%y%m%d")
        suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(4))
        return f"{date_prefix}-{suffix}"

    def _to_domain_model(self, db_booking: BookingTable) -> Booking:
        """Convert database model to domain model."""
        return Booking(
            id=db_booking.id,
            code=db_booking.code,
            field_id=db_booking.field_id,
            account_id=db_booking.account_id,
            customer_name=db_booking.customer_name,
            customer_phone=db_booking.customer_phone,
            start_time=db_booking.start_time,
            end_time=db_booking.end_time,
            total_price=db_booking.total_price,
            final_price=db_booking.final_price,
            voucher_id=db_booking.voucher_id,
            status=db_booking.status,
            check_in_at=db_booking.check_in_at,
            created_at=db_booking.created_at,
            updated_at=db_booking.updated_at,
        )
