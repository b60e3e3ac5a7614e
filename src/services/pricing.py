"""Time-of-day price resolution.

Maps a requested start time to the hourly rate of the matching price tier
and computes the rounded total for the requested duration.
"""

from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from decimal import ROUND_CEILING, Decimal
from typing import Optional, Protocol
from uuid import UUID

from src.logging import get_logger
from src.models.time_slot import TimeSlot

logger = get_logger(__name__)

# Fallback rate when no tier covers the start time
DEFAULT_PRICE_PER_HOUR = Decimal("100000")
# Totals are rounded up to a multiple of this amount
DEFAULT_ROUNDING_UNIT = Decimal("1000")


class TierLookup(Protocol):
    async def find_matching(self, field_type_id: UUID, time_of_day: time) -> Optional[TimeSlot]: ...


@dataclass(frozen=True)
class PriceResult:
    """Hourly rate and rounded total of one request."""

    price_per_hour: Decimal
    total_price: Decimal
    tier_id: Optional[UUID] = None

    @property
    def used_default_rate(self) -> bool:
        return self.tier_id is None


def round_up_total(
    price_per_hour: Decimal, duration_minutes: int, rounding_unit: Decimal
) -> Decimal:
    """Pro-rate an hourly price and round up to the next multiple of ``rounding_unit``.

    Never rounds down: a raw total that is not already a multiple of the unit
    always becomes strictly larger.
    """
    raw = Decimal(price_per_hour) * duration_minutes / 60
    units = (raw / rounding_unit).to_integral_value(rounding=ROUND_CEILING)
    return units * rounding_unit


class PriceResolver:
    """Resolves the price of a field booking from its field type's tiers."""

    def __init__(
        self,
        tier_repo: TierLookup,
        tz: tzinfo,
        default_price_per_hour: Decimal = DEFAULT_PRICE_PER_HOUR,
        rounding_unit: Decimal = DEFAULT_ROUNDING_UNIT,
    ):
        """
        Initialize price resolver.

        Args:
            tier_repo: Time slot repository used for the tier lookup
            tz: Business timezone for wall-clock extraction
            default_price_per_hour: Rate applied when no tier matches
            rounding_unit: Granularity of the rounded-up total
        """
        self.tier_repo = tier_repo
        self.tz = tz
        self.default_price_per_hour = Decimal(default_price_per_hour)
        self.rounding_unit = Decimal(rounding_unit)

    async def resolve_price(
        self, field_type_id: UUID, start: datetime, duration_minutes: int
    ) -> PriceResult:
        """
        Compute hourly rate and total for a booking.

        Args:
            field_type_id: Pricing category of the booked field
            start: Requested start instant (timezone-aware)
            duration_minutes: Requested duration

        Returns:
            PriceResult with rate, rounded total and the tier used (if any)
        """
        time_of_day = start.astimezone(self.tz).time().replace(tzinfo=None)
        tier = await self.tier_repo.find_matching(field_type_id, time_of_day)

        if tier is None:
            # Possibly a gap in the tier configuration
            logger.warning(
                "price_tier_fallback",
                field_type_id=str(field_type_id),
                time_of_day=time_of_day.isoformat(),
                default_price_per_hour=float(self.default_price_per_hour),
            )
            price_per_hour = self.default_price_per_hour
            tier_id = None
        else:
            price_per_hour = Decimal(tier.price)
            tier_id = tier.id

        total = round_up_total(price_per_hour, duration_minutes, self.rounding_unit)

        return PriceResult(price_per_hour=price_per_hour, total_price=total, tier_id=tier_id)
