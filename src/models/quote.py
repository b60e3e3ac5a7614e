"""Availability quote models returned by the pricing engine."""

from decimal import Decimal

from pydantic import BaseModel, field_serializer


class BookingDetails(BaseModel):
    """Requested window rendered in the business timezone."""

    date: str
    start_time: str
    end_time: str
    duration: str


class PricingDetails(BaseModel):
    """Resolved hourly rate and rounded total."""

    price_per_hour: Decimal
    total_price: Decimal
    currency: str

    @field_serializer("price_per_hour", "total_price")
    def serialize_amount(self, v: Decimal) -> int | float:
        """Money goes out as a JSON number."""
        if v == v.to_integral_value():
            return int(v)
        return float(v)


class AvailabilityQuote(BaseModel):
    """Positive answer of an availability and price check."""

    available: bool = True
    field_name: str
    booking_details: BookingDetails
    pricing: PricingDetails
    message: str
