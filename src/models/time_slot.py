"""Time slot (price tier) domain models."""

from datetime import time
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_serializer, field_validator


class TimeSlot(BaseModel):
    """Wall-clock band with an hourly rate for one field type.

    The band covers ``start_time <= t < end_time``.
    """

    id: UUID = Field(default_factory=uuid4)
    field_type_id: UUID
    start_time: time = Field(description="Band start, inclusive")
    end_time: time = Field(description="Band end, exclusive")
    price: Decimal = Field(ge=0, description="Price per hour")
    is_peak_hour: bool = False

    @field_validator("end_time")
    @classmethod
    def validate_time_range(cls, v: time, info) -> time:
        """Ensure start_time < end_time."""
        values = info.data
        if "start_time" in values and v <= values["start_time"]:
            raise ValueError("end_time must be after start_time")
        return v

    @field_serializer("price")
    def serialize_price(self, v: Decimal) -> int | float:
        if v == v.to_integral_value():
            return int(v)
        return float(v)


class TimeSlotInput(BaseModel):
    """Input model for time slot creation."""

    field_type_id: UUID
    start_time: time
    end_time: time
    price: Decimal = Field(ge=0)
    is_peak_hour: bool = False

    @field_validator("end_time")
    @classmethod
    def validate_time_range(cls, v: time, info) -> time:
        """Ensure start_time < end_time."""
        values = info.data
        if "start_time" in values and v <= values["start_time"]:
            raise ValueError("end_time must be after start_time")
        return v


class TimeSlotUpdate(BaseModel):
    """Partial update of a time slot. Unset fields are left unchanged."""

    price: Optional[Decimal] = Field(default=None, ge=0)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_peak_hour: Optional[bool] = None
