"""Field and field type domain models."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field as PydanticField


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FieldType(BaseModel):
    """Pricing category shared by several fields (e.g. 5-a-side, 7-a-side)."""

    id: UUID = PydanticField(default_factory=uuid4)
    name: str = PydanticField(min_length=1, max_length=100)
    description: Optional[str] = PydanticField(default=None, max_length=500)


class Field(BaseModel):
    """Bookable sports field."""

    id: UUID = PydanticField(default_factory=uuid4)
    name: str = PydanticField(min_length=1, max_length=150)
    field_type_id: UUID = PydanticField(description="Pricing category of the field")
    is_active: bool = PydanticField(default=True, description="Inactive fields cannot be booked")
    created_at: datetime = PydanticField(default_factory=_utcnow)
    updated_at: datetime = PydanticField(default_factory=_utcnow)


class FieldInput(BaseModel):
    """Input model for field creation."""

    name: str = PydanticField(min_length=1, max_length=150)
    field_type_id: UUID
    is_active: bool = True


class FieldUpdate(BaseModel):
    """Partial update of a field. Unset fields are left unchanged."""

    name: Optional[str] = PydanticField(default=None, min_length=1, max_length=150)
    field_type_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class FieldTypeInput(BaseModel):
    """Input model for field type creation."""

    name: str = PydanticField(min_length=1, max_length=100)
    description: Optional[str] = PydanticField(default=None, max_length=500)
