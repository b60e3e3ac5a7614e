"""Price tier administration."""

from typing import Optional
from uuid import UUID

from src.logging import get_logger
from src.logging.audit import AuditLogger
from src.models.time_slot import TimeSlot, TimeSlotUpdate
from src.services.errors import InvalidRequest, NotFound
from src.storage.postgres_time_slot_repo import PostgresTimeSlotRepository

logger = get_logger(__name__)


class TimeSlotService:
    """Lists and edits the time slots that drive pricing."""

    def __init__(self, time_slot_repo: PostgresTimeSlotRepository):
        self.time_slot_repo = time_slot_repo

    async def list_time_slots(self) -> list[TimeSlot]:
        return await self.time_slot_repo.list_all()

    async def update_time_slot(
        self, slot_id: UUID, changes: TimeSlotUpdate, actor_id: Optional[UUID] = None
    ) -> TimeSlot:
        """
        Apply a partial update to a time slot.

        Raises:
            NotFound: Unknown slot
            InvalidRequest: Resulting band would not have start < end
        """
        slot = await self.time_slot_repo.get_by_id(slot_id)
        if slot is None:
            raise NotFound(f"Time slot {slot_id} not found.")

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return slot

        updated = slot.model_copy(update=fields)
        if updated.start_time >= updated.end_time:
            raise InvalidRequest("Time slot start must be before its end.")

        saved = await self.time_slot_repo.update(updated)

        AuditLogger.log_time_slot_updated(
            actor_id=actor_id,
            slot_id=slot_id,
            changes={k: str(v) for k, v in fields.items()},
        )

        return saved
