"""Structured audit logging for booking lifecycle actions.

Provides detailed audit trails for compliance and dispute resolution.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from src.logging import get_logger

logger = get_logger(__name__)


class AuditEventType(str, Enum):
    """Types of auditable events."""

    # Booking lifecycle
    BOOKING_CREATED = "booking_created"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_CHECKED_IN = "booking_checked_in"
    BOOKING_EXPIRED = "booking_expired"
    BOOKING_FINISHED = "booking_finished"

    # Pricing administration
    TIME_SLOT_UPDATED = "time_slot_updated"

    # Field administration
    FIELD_CREATED = "field_created"
    FIELD_UPDATED = "field_updated"
    FIELD_DELETED = "field_deleted"

    # Security
    PERMISSION_DENIED = "permission_denied"


class AuditLogger:
    """Centralized audit logging service."""

    @staticmethod
    def log_event(
        event_type: AuditEventType,
        actor_id: UUID | str | None,
        resource_type: str,
        resource_id: UUID | str,
        action: str,
        success: bool = True,
        metadata: Optional[dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Log an auditable event with structured context.

        Args:
            event_type: Type of audit event
            actor_id: Account performing the action (None for system jobs)
            resource_type: Type of resource (booking, field, time_slot)
            resource_id: ID of the affected resource
            action: Human-readable action description
            success: Whether the action succeeded
            metadata: Additional context (prices, windows, etc.)
            error: Error message if action failed
        """
        audit_entry = {
            "event_type": event_type.value,
            "actor_id": str(actor_id) if actor_id is not None else "system",
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            "action": action,
            "success": success,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "metadata": metadata or {},
        }

        if error:
            audit_entry["error"] = error

        logger.info(
            "audit_event",
            **audit_entry,
        )

    @staticmethod
    def log_booking_created(
        actor_id: UUID | None,
        booking_id: UUID,
        field_id: UUID,
        start_time: datetime,
        end_time: datetime,
        final_price: float,
        voucher_code: Optional[str] = None,
    ) -> None:
        """Log booking creation."""
        AuditLogger.log_event(
            event_type=AuditEventType.BOOKING_CREATED,
            actor_id=actor_id,
            resource_type="booking",
            resource_id=booking_id,
            action="Booking created",
            metadata={
                "field_id": str(field_id),
                "start_time": start_time.isoformat(),
                "end_time": end_time.isoformat(),
                "final_price": final_price,
                "voucher_code": voucher_code,
            },
        )

    @staticmethod
    def log_booking_cancelled(
        actor_id: UUID | None,
        booking_id: UUID,
        reason: str,
    ) -> None:
        """Log booking cancellation (by a user or by the expiration job)."""
        event_type = (
            AuditEventType.BOOKING_CANCELLED
            if actor_id is not None
            else AuditEventType.BOOKING_EXPIRED
        )
        AuditLogger.log_event(
            event_type=event_type,
            actor_id=actor_id,
            resource_type="booking",
            resource_id=booking_id,
            action="Booking cancelled",
            metadata={"reason": reason},
        )

    @staticmethod
    def log_booking_status_changed(
        event_type: AuditEventType,
        booking_id: UUID,
        status: str,
        actor_id: UUID | None = None,
    ) -> None:
        """Log check-in and completion transitions."""
        AuditLogger.log_event(
            event_type=event_type,
            actor_id=actor_id,
            resource_type="booking",
            resource_id=booking_id,
            action=f"Booking moved to {status}",
            metadata={"status": status},
        )

    @staticmethod
    def log_time_slot_updated(
        actor_id: UUID | None,
        slot_id: UUID,
        changes: dict[str, Any],
    ) -> None:
        """Log price tier edits."""
        AuditLogger.log_event(
            event_type=AuditEventType.TIME_SLOT_UPDATED,
            actor_id=actor_id,
            resource_type="time_slot",
            resource_id=slot_id,
            action="Updated time slot",
            metadata={"changes": changes},
        )

    @staticmethod
    def log_field_changed(
        event_type: AuditEventType,
        actor_id: UUID | None,
        field_id: UUID,
        changes: Optional[dict[str, Any]] = None,
    ) -> None:
        """Log field creation, edits and removal."""
        AuditLogger.log_event(
            event_type=event_type,
            actor_id=actor_id,
            resource_type="field",
            resource_id=field_id,
            action=event_type.value.replace("_", " ").capitalize(),
            metadata={"changes": changes or {}},
        )

    @staticmethod
    def log_permission_denied(
        actor_id: UUID | str | None,
        resource_type: str,
        resource_id: UUID | str,
        attempted_action: str,
    ) -> None:
        """Log unauthorized access attempts."""
        AuditLogger.log_event(
            event_type=AuditEventType.PERMISSION_DENIED,
            actor_id=actor_id,
            resource_type=resource_type,
            resource_id=resource_id,
            action=f"Permission denied: {attempted_action}",
            success=False,
            metadata={"attempted_action": attempted_action},
        )
