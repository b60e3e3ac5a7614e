"""Request and response bodies of the HTTP API."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from src.models.booking import Booking, BookingStatus
from src.services.availability import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES


class AvailabilityRequest(BaseModel):
    """Body of ``POST /pricing/check-availability``."""

    model_config = ConfigDict(populate_by_name=True)

    field_id: UUID = Field(alias="fieldId")
    start_time: datetime = Field(alias="startTime")
    duration_minutes: int = Field(
        alias="durationMinutes", ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES
    )


class BookingRequest(AvailabilityRequest):
    """Body of ``POST /bookings``."""

    voucher_code: Optional[str] = Field(default=None, alias="voucherCode", max_length=50)


class AdminBookingRequest(AvailabilityRequest):
    """Body of ``POST /bookings/management/create``."""

    customer_name: Optional[str] = Field(default=None, alias="customerName", max_length=150)
    customer_phone: Optional[str] = Field(default=None, alias="customerPhone", max_length=20)


class BookingResponse(BaseModel):
    id: UUID
    code: str
    field_id: UUID
    account_id: Optional[UUID]
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    start_time: datetime
    end_time: datetime
    total_price: Decimal
    final_price: Decimal
    status: BookingStatus
    check_in_at: Optional[datetime] = None

    @field_serializer("total_price", "final_price")
    def serialize_amount(self, v: Decimal) -> int | float:
        if v == v.to_integral_value():
            return int(v)
        return float(v)

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(**booking.model_dump(include=set(cls.model_fields)))


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    last_page: int


class BookingPage(BaseModel):
    data: list[BookingResponse]
    meta: PageMeta


class MessageResponse(BaseModel):
    message: str
