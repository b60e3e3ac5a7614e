"""Voucher domain model."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class Voucher(BaseModel):
    """Discount code redeemable on booking creation."""

    id: UUID = Field(default_factory=uuid4)
    code: str = Field(min_length=1, max_length=50)
    quantity: int = Field(ge=0, description="Remaining redemptions")
    valid_from: datetime
    valid_to: datetime
    min_order_value: Decimal = Field(default=Decimal("0"), ge=0)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0, description="Fixed discount")
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    max_discount_amount: Optional[Decimal] = Field(default=None, ge=0, description="Cap for percentage discounts")
