"""Field type (pricing category) endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_field_service, require_admin
from src.models.field import FieldType, FieldTypeInput
from src.services.fields import FieldService

router = APIRouter(prefix="/field-types", tags=["Field Types"])


@router.get("", response_model=list[FieldType])
async def list_field_types(service: FieldService = Depends(get_field_service)):
    return await service.list_field_types()


@router.post(
    "", response_model=FieldType, status_code=201, dependencies=[Depends(require_admin)]
)
async def create_field_type(
    body: FieldTypeInput,
    service: FieldService = Depends(get_field_service),
):
    return await service.create_field_type(body)
