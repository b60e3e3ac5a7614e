"""Models package - Pydantic domain models."""

from .booking import Booking, BookingInput, BookingStatus
from .field import Field, FieldInput, FieldType, FieldTypeInput, FieldUpdate
from .quote import AvailabilityQuote, BookingDetails, PricingDetails
from .schedule import FieldSchedule, ScheduleEntry
from .time_slot import TimeSlot, TimeSlotInput, TimeSlotUpdate
from .voucher import Voucher

__all__ = [
    "AvailabilityQuote",
    "Booking",
    "BookingDetails",
    "BookingInput",
    "BookingStatus",
    "Field",
    "FieldInput",
    "FieldSchedule",
    "FieldType",
    "FieldTypeInput",
    "FieldUpdate",
    "PricingDetails",
    "ScheduleEntry",
    "TimeSlot",
    "TimeSlotInput",
    "TimeSlotUpdate",
    "Voucher",
]
