"""Voucher validation and discount computation."""

from datetime import datetime
from decimal import Decimal

from src.models.voucher import Voucher
from src.services.errors import InvalidRequest


def validate_voucher(voucher: Voucher, order_total: Decimal, now: datetime) -> None:
    """
    Check that a voucher can be redeemed on an order.

    Raises:
        InvalidRequest: No redemptions left, outside validity window, or
            order below the minimum value
    """
    if voucher.quantity <= 0:
        raise InvalidRequest("Voucher has no redemptions left.")
    if now > voucher.valid_to:
        raise InvalidRequest("Voucher has expired.")
    if now < voucher.valid_from:
        raise InvalidRequest("Voucher is not valid yet.")
    if order_total < voucher.min_order_value:
        raise InvalidRequest(
            f"Order total must be at least {voucher.min_order_value:,.0f} to use this voucher."
        )


def compute_discount(voucher: Voucher, order_total: Decimal) -> Decimal:
    """Fixed amount wins over percentage; percentage discounts are capped."""
    if voucher.discount_amount:
        return Decimal(voucher.discount_amount)

    if voucher.discount_percentage:
        discount = order_total * Decimal(voucher.discount_percentage) / 100
        if voucher.max_discount_amount and discount > voucher.max_discount_amount:
            discount = Decimal(voucher.max_discount_amount)
        return discount

    return Decimal("0")


def apply_voucher(voucher: Voucher, order_total: Decimal, now: datetime) -> Decimal:
    """Validate a voucher and return the amount left to pay (never negative)."""
    validate_voucher(voucher, order_total, now)
    return max(Decimal("0"), order_total - compute_discount(voucher, order_total))
