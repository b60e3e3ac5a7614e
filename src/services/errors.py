"""Booking error taxonomy.

Every error is terminal for the request and maps 1:1 to an HTTP status at
the API boundary.
"""


class BookingError(Exception):
    """Base class for user-facing booking errors."""

    status_code: int = 400
    error: str = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


class InvalidRequest(BookingError):
    """Past start time, inactive field, bad duration, unusable voucher."""

    status_code = 400
    error = "invalid_request"


class OperatingHoursViolation(InvalidRequest):
    """Requested window lies outside business hours."""

    error = "operating_hours_violation"


class Unauthorized(BookingError):
    status_code = 401
    error = "unauthorized"


class Forbidden(BookingError):
    status_code = 403
    error = "forbidden"


class NotFound(BookingError):
    status_code = 404
    error = "not_found"


class SchedulingConflict(BookingError):
    """Requested window intersects a non-cancelled booking."""

    status_code = 409
    error = "scheduling_conflict"
