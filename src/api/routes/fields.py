"""Field endpoints: catalogue, administration and daily schedule."""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_availability_service, get_field_service, require_admin
from src.api.schemas import MessageResponse
from src.models.field import Field, FieldInput, FieldUpdate
from src.models.schedule import FieldSchedule
from src.services.availability import AvailabilityService
from src.services.fields import FieldService

router = APIRouter(prefix="/fields", tags=["Fields"])


@router.post("", response_model=Field, status_code=201)
async def create_field(
    body: FieldInput,
    admin_id: UUID = Depends(require_admin),
    service: FieldService = Depends(get_field_service),
):
    return await service.create_field(body, actor_id=admin_id)


@router.get("", response_model=list[Field])
async def list_fields(
    field_type_id: Optional[UUID] = Query(default=None, alias="fieldTypeId"),
    service: FieldService = Depends(get_field_service),
):
    return await service.list_fields(field_type_id)


@router.get("/{field_id}", response_model=Field)
async def get_field(field_id: UUID, service: FieldService = Depends(get_field_service)):
    return await service.get_field(field_id)


@router.put("/{field_id}", response_model=Field)
async def update_field(
    field_id: UUID,
    body: FieldUpdate,
    admin_id: UUID = Depends(require_admin),
    service: FieldService = Depends(get_field_service),
):
    """Rename, move to another field type, or take a field out of service."""
    return await service.update_field(field_id, body, actor_id=admin_id)


@router.delete("/{field_id}", response_model=MessageResponse)
async def delete_field(
    field_id: UUID,
    admin_id: UUID = Depends(require_admin),
    service: FieldService = Depends(get_field_service),
):
    field = await service.delete_field(field_id, actor_id=admin_id)
    return MessageResponse(message=f"Field {field.name} has been deleted.")


@router.get("/{field_id}/schedule", response_model=FieldSchedule)
async def get_field_schedule(
    field_id: UUID,
    day: date = Query(alias="date"),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Non-cancelled bookings of a field on one local day."""
    return await service.get_field_schedule(field_id, day)
