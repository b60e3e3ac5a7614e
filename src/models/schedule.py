"""Per-day field schedule models."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel

from .booking import BookingStatus


class ScheduleEntry(BaseModel):
    """One occupied window."""

    start_time: dt.datetime
    end_time: dt.datetime
    status: BookingStatus


class FieldSchedule(BaseModel):
    """Non-cancelled bookings of a field on one local calendar day."""

    date: dt.date
    field_id: UUID
    bookings: list[ScheduleEntry]
