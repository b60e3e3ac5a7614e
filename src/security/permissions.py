"""Permission checks for booking and pricing actions."""

from enum import Enum
from typing import Iterable, Optional
from uuid import UUID

from src.models.booking import Booking


class Permission(str, Enum):
    """Permission types."""

    CHECK_AVAILABILITY = "check_availability"
    CREATE_BOOKING = "create_booking"
    CANCEL_BOOKING = "cancel_booking"
    CHECK_IN_BOOKING = "check_in_booking"
    MANAGE_PRICING = "manage_pricing"


ADMIN_ONLY = frozenset({Permission.CHECK_IN_BOOKING, Permission.MANAGE_PRICING})


class PermissionChecker:
    """Check account permissions for actions."""

    def __init__(self, admin_account_ids: Optional[Iterable[str]] = None):
        """Initialize permission checker."""
        self.admin_account_ids = {str(a).lower() for a in (admin_account_ids or [])}

    def is_admin(self, account_id: Optional[UUID]) -> bool:
        """Check if account is listed as admin."""
        return account_id is not None and str(account_id).lower() in self.admin_account_ids

    def has_permission(self, account_id: Optional[UUID], permission: Permission) -> bool:
        if permission in ADMIN_ONLY:
            return self.is_admin(account_id)
        return account_id is not None

    def can_cancel_booking(self, account_id: Optional[UUID], booking: Booking) -> bool:
        """Owners cancel their own bookings; admins cancel any."""
        if self.is_admin(account_id):
            return True
        return account_id is not None and booking.account_id == account_id

    def can_manage_pricing(self, account_id: Optional[UUID]) -> bool:
        """Check if account can edit time slots (admin only)."""
        return self.has_permission(account_id, Permission.MANAGE_PRICING)
