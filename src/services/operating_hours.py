"""Operating-hours validation for requested booking windows."""

from datetime import datetime, tzinfo

from src.services.errors import OperatingHoursViolation


class OperatingHoursValidator:
    """Rejects windows outside ``open_hour`` .. ``close_hour`` in the business timezone.

    Start rule: the local start hour must lie in [open_hour, close_hour], so a
    start at exactly ``close_hour:00`` passes. End rule: the local end may be at
    most ``close_hour:00``; one second later is rejected. A window ending on a
    later local date than it starts is rejected as well.
    """

    def __init__(self, open_hour: int, close_hour: int, tz: tzinfo):
        self.open_hour = open_hour
        self.close_hour = close_hour
        self.tz = tz

    def validate(self, start: datetime, end: datetime) -> None:
        """
        Validate a requested window.

        Args:
            start: Window start (timezone-aware)
            end: Window end (timezone-aware)

        Raises:
            OperatingHoursViolation: If any bound falls outside business hours
        """
        local_start = start.astimezone(self.tz)
        local_end = end.astimezone(self.tz)

        if local_start.hour < self.open_hour or local_start.hour > self.close_hour:
            raise OperatingHoursViolation(self._message())

        if local_end.date() > local_start.date():
            raise OperatingHoursViolation(self._message())

        if local_end.hour > self.close_hour:
            raise OperatingHoursViolation(self._message())

        past_closing = (local_end.minute, local_end.second, local_end.microsecond) != (0, 0, 0)
        if local_end.hour == self.close_hour and past_closing:
            raise OperatingHoursViolation(self._message())

    def _message(self) -> str:
        return (
            f"Fields can only be booked between {self.open_hour:02d}:00 "
            f"and {self.close_hour:02d}:00."
        )
