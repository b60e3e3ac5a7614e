"""Booking domain model."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "pending"  # created, awaiting online payment
    CONFIRMED = "confirmed"  # confirmed by staff without payment
    COMPLETED = "completed"  # paid, ready for check-in
    CANCELLED = "cancelled"
    CHECKED_IN = "checked_in"
    FINISHED = "finished"


class Booking(BaseModel):
    """Booking of one field for a [start_time, end_time) window."""

    id: UUID = Field(default_factory=uuid4)
    code: str = Field(min_length=11, max_length=11, description="Customer-facing code (e.g., 251206-AH92)")
    field_id: UUID
    account_id: Optional[UUID] = Field(default=None, description="Booking owner, None for walk-in customers")
    customer_name: Optional[str] = Field(default=None, max_length=150)
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    start_time: datetime
    end_time: datetime
    total_price: Decimal = Field(ge=0, description="Quoted price before discounts")
    final_price: Decimal = Field(ge=0, description="Amount to pay after voucher")
    voucher_id: Optional[UUID] = None
    status: BookingStatus = Field(default=BookingStatus.PENDING)
    check_in_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("end_time")
    @classmethod
    def validate_time_range(cls, v: datetime, info) -> datetime:
        """Ensure start_time < end_time."""
        values = info.data
        if "start_time" in values and v <= values["start_time"]:
            raise ValueError("end_time must be after start_time")
        return v

    @property
    def blocks_field(self) -> bool:
        """Every status except cancelled occupies the field."""
        return self.status != BookingStatus.CANCELLED


class BookingInput(BaseModel):
    """Input model for booking creation."""

    field_id: UUID
    account_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    start_time: datetime
    end_time: datetime
    total_price: Decimal = Field(ge=0)
    final_price: Decimal = Field(ge=0)
    voucher_id: Optional[UUID] = None
    status: BookingStatus = BookingStatus.PENDING

    @field_validator("end_time")
    @classmethod
    def validate_time_range(cls, v: datetime, info) -> datetime:
        """Ensure start_time < end_time."""
        values = info.data
        if "start_time" in values and v <= values["start_time"]:
            raise ValueError("end_time must be after start_time")
        return v
