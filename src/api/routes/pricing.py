"""Availability check and price tier endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies import get_availability_service, get_time_slot_service, require_admin
from src.api.schemas import AvailabilityRequest
from src.models.quote import AvailabilityQuote
from src.models.time_slot import TimeSlot, TimeSlotUpdate
from src.services.availability import AvailabilityService
from src.services.time_slots import TimeSlotService

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post("/check-availability", response_model=AvailabilityQuote)
async def check_availability(
    body: AvailabilityRequest,
    service: AvailabilityService = Depends(get_availability_service),
):
    """Check that a field is free for a window and quote its price."""
    return await service.check_availability_and_price(
        body.field_id, body.start_time, body.duration_minutes
    )


@router.get("/time-slots", response_model=list[TimeSlot])
async def list_time_slots(service: TimeSlotService = Depends(get_time_slot_service)):
    return await service.list_time_slots()


@router.patch("/time-slots/{slot_id}", response_model=TimeSlot)
async def update_time_slot(
    slot_id: UUID,
    body: TimeSlotUpdate,
    admin_id: UUID = Depends(require_admin),
    service: TimeSlotService = Depends(get_time_slot_service),
):
    """Change the rate or band of a time slot (admin only)."""
    return await service.update_time_slot(slot_id, body, actor_id=admin_id)
