"""Booking availability and pricing engine.

Sequences operating-hours validation, field status check, overlap check and
price resolution for a requested window, short-circuiting on the first
failure. Read only: nothing is persisted here.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional, Protocol
from uuid import UUID

from src.config.settings import Settings
from src.logging import get_logger
from src.models.booking import Booking
from src.models.field import Field
from src.models.quote import AvailabilityQuote, BookingDetails, PricingDetails
from src.models.schedule import FieldSchedule, ScheduleEntry
from src.services.errors import InvalidRequest, NotFound, SchedulingConflict
from src.services.operating_hours import OperatingHoursValidator
from src.services.overlap import BookingLookup, OverlapChecker
from src.services.pricing import PriceResolver

logger = get_logger(__name__)

MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 300

AVAILABLE_MESSAGE = "Field is available and can be booked now."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FieldLookup(Protocol):
    async def get_by_id(self, id: UUID) -> Optional[Field]: ...


class ScheduleLookup(BookingLookup, Protocol):
    async def get_by_field_between(
        self, field_id: UUID, start: datetime, end: datetime
    ) -> list[Booking]: ...


class AvailabilityService:
    """Answers "can this field be booked for this window, and at what price?"."""

    def __init__(
        self,
        field_repo: FieldLookup,
        booking_repo: ScheduleLookup,
        price_resolver: PriceResolver,
        hours_validator: OperatingHoursValidator,
        tz: tzinfo,
        currency: str = "VND",
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize availability service.

        Args:
            field_repo: Field store (``get_by_id``)
            booking_repo: Booking store (``find_overlapping``, ``get_by_field_between``)
            price_resolver: Tier-based price resolver
            hours_validator: Business-hours validator
            tz: Business timezone for rendering and day boundaries
            currency: Currency code reported in quotes
            clock: Source of the current instant
        """
        self.field_repo = field_repo
        self.booking_repo = booking_repo
        self.overlap_checker = OverlapChecker(booking_repo)
        self.price_resolver = price_resolver
        self.hours_validator = hours_validator
        self.tz = tz
        self.currency = currency
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        field_repo: FieldLookup,
        booking_repo: ScheduleLookup,
        time_slot_repo,
        clock: Callable[[], datetime] = utc_now,
    ) -> "AvailabilityService":
        """Wire the engine from application settings."""
        tz = settings.timezone
        return cls(
            field_repo=field_repo,
            booking_repo=booking_repo,
            price_resolver=PriceResolver(
                time_slot_repo,
                tz,
                default_price_per_hour=settings.default_price_per_hour,
                rounding_unit=settings.price_rounding_unit,
            ),
            hours_validator=OperatingHoursValidator(settings.open_hour, settings.close_hour, tz),
            tz=tz,
            currency=settings.currency,
            clock=clock,
        )

    def localize(self, value: datetime) -> datetime:
        """Treat naive datetimes as business-local wall clock."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value

    async def check_availability_and_price(
        self, field_id: UUID, start_time: datetime, duration_minutes: int
    ) -> AvailabilityQuote:
        """
        Check a requested window and quote its price.

        Args:
            field_id: Field to book
            start_time: Requested start (naive values are business-local)
            duration_minutes: Requested duration, 30 to 300 minutes

        Returns:
            AvailabilityQuote for the free window

        Raises:
            InvalidRequest: Bad duration, start in the past, or inactive field
            OperatingHoursViolation: Window outside business hours
            NotFound: Unknown field
            SchedulingConflict: Window overlaps a non-cancelled booking
        """
        if not MIN_DURATION_MINUTES <= duration_minutes <= MAX_DURATION_MINUTES:
            raise InvalidRequest(
                f"Duration must be between {MIN_DURATION_MINUTES} and "
                f"{MAX_DURATION_MINUTES} minutes."
            )

        start = self.localize(start_time)
        if start < self.clock():
            raise InvalidRequest("Cannot book a field in the past.")

        end = start + timedelta(minutes=duration_minutes)

        self.hours_validator.validate(start, end)

        field = await self.field_repo.get_by_id(field_id)
        if field is None:
            raise NotFound(f"Field with ID {field_id} does not exist.")
        if not field.is_active:
            raise InvalidRequest("This field is temporarily out of service.")

        conflict = await self.overlap_checker.find_conflict(field_id, start, end)
        if conflict is not None:
            logger.info(
                "availability_conflict",
                field_id=str(field_id),
                conflicting_booking_id=str(conflict.id),
            )
            raise SchedulingConflict(
                f"The selected window ({self._clock_time(start)} - {self._clock_time(end)}) "
                f"overlaps another booking ({self._clock_time(conflict.start_time)} - "
                f"{self._clock_time(conflict.end_time)})."
            )

        price = await self.price_resolver.resolve_price(
            field.field_type_id, start, duration_minutes
        )

        logger.info(
            "availability_checked",
            field_id=str(field_id),
            start_time=start.isoformat(),
            duration_minutes=duration_minutes,
            price_per_hour=float(price.price_per_hour),
            total_price=float(price.total_price),
        )

        local_start = start.astimezone(self.tz)
        return AvailabilityQuote(
            available=True,
            field_name=field.name,
            booking_details=BookingDetails(
                date=local_start.strftime("%d/%m/%Y"),
                start_time=self._clock_time(start),
                end_time=self._clock_time(end),
                duration=f"{duration_minutes} minutes",
            ),
            pricing=PricingDetails(
                price_per_hour=price.price_per_hour,
                total_price=price.total_price,
                currency=self.currency,
            ),
            message=AVAILABLE_MESSAGE,
        )

    async def get_field_schedule(self, field_id: UUID, day: date) -> FieldSchedule:
        """List non-cancelled bookings intersecting one local calendar day."""
        field = await self.field_repo.get_by_id(field_id)
        if field is None:
            raise NotFound(f"Field with ID {field_id} does not exist.")

        day_start = datetime.combine(day, time.min, tzinfo=self.tz)
        day_end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.tz)

        bookings = await self.booking_repo.get_by_field_between(field_id, day_start, day_end)

        return FieldSchedule(
            date=day,
            field_id=field_id,
            bookings=[
                ScheduleEntry(start_time=b.start_time, end_time=b.end_time, status=b.status)
                for b in bookings
            ],
        )

    def _clock_time(self, value: datetime) -> str:
        return value.astimezone(self.tz).strftime("%H:%M")
