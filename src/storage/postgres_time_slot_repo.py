"""PostgreSQL repository for TimeSlot (price tier) entities."""

from datetime import time
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.logging import get_logger
from src.models.time_slot import TimeSlot, TimeSlotInput
from src.storage.db_models import TimeSlotTable
from src.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


class PostgresTimeSlotRepository(RepositoryBase[TimeSlot]):
    """Time slot repository using PostgreSQL."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[TimeSlot]:
        """Retrieve time slot by ID."""
        db_slot = await self.session.get(TimeSlotTable, id)
        if not db_slot:
            return None
        return self._to_domain_model(db_slot)

    async def find_matching(self, field_type_id: UUID, time_of_day: time) -> Optional[TimeSlot]:
        """
        Find the tier of a field type covering a wall-clock time.

        Start is inclusive and end exclusive, so a request starting exactly
        when a tier ends falls through to the next tier.
        """
        stmt = (
            select(TimeSlotTable)
            .where(TimeSlotTable.field_type_id == field_type_id)
            .where(TimeSlotTable.start_time <= time_of_day)
            .where(TimeSlotTable.end_time > time_of_day)
            .order_by(TimeSlotTable.start_time.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        db_slot = result.scalar_one_or_none()

        if not db_slot:
            return None

        return self._to_domain_model(db_slot)

    async def list_all(self) -> list[TimeSlot]:
        """Get every tier ordered by field type and start time."""
        stmt = select(TimeSlotTable).order_by(
            TimeSlotTable.field_type_id, TimeSlotTable.start_time.asc()
        )
        result = await self.session.execute(stmt)
        return [self._to_domain_model(s) for s in result.scalars().all()]

    async def create(self, entity: TimeSlotInput) -> TimeSlot:
        """Create new time slot."""
        db_slot = TimeSlotTable(
            field_type_id=entity.field_type_id,
            start_time=entity.start_time,
            end_time=entity.end_time,
            price=entity.price,
            is_peak_hour=entity.is_peak_hour,
        )
        self.session.add(db_slot)
        await self.session.flush()

        logger.info(
            "time_slot_created",
            slot_id=str(db_slot.id),
            field_type_id=str(entity.field_type_id),
            start_time=entity.start_time.isoformat(),
            end_time=entity.end_time.isoformat(),
        )

        return self._to_domain_model(db_slot)

    async def update(self, entity: TimeSlot) -> TimeSlot:
        """Update existing time slot."""
        db_slot = await self.session.get(TimeSlotTable, entity.id)
        if not db_slot:
            raise ValueError(f"Time slot not found: {entity.id}")

        db_slot.start_time = entity.start_time
        db_slot.end_time = entity.end_time
        db_slot.price = entity.price
        db_slot.is_peak_hour = entity.is_peak_hour

        await self.session.flush()
        await self.session.commit()

        logger.info("time_slot_updated", slot_id=str(entity.id))

        return self._to_domain_model(db_slot)

    async def delete(self, id: UUID) -> bool:
        """Delete time slot by ID."""
        db_slot = await self.session.get(TimeSlotTable, id)
        if not db_slot:
            return False

        await self.session.delete(db_slot)
        await self.session.flush()

        logger.info("time_slot_deleted", slot_id=str(id))

        return True

    def _to_domain_model(self, db_slot: TimeSlotTable) -> TimeSlot:
        """Convert database model to domain model."""
        return TimeSlot(
            id=db_slot.id,
            field_type_id=db_slot.field_type_id,
            start_time=db_slot.start_time,
            end_time=db_slot.end_time,
            price=db_slot.price,
            is_peak_hour=db_slot.is_peak_hour,
        )
