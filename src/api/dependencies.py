"""FastAPI dependency providers: settings, sessions, services, caller identity."""

from functools import lru_cache
from typing import AsyncIterator, Optional
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings, load_settings
from src.logging.audit import AuditLogger
from src.security.permissions import PermissionChecker
from src.services.availability import AvailabilityService
from src.services.booking_flow import BookingFlowService
from src.services.fields import FieldService
from src.services.errors import Forbidden, Unauthorized
from src.services.time_slots import TimeSlotService
from src.storage.database import Database
from src.storage.postgres_booking_repo import PostgresBookingRepository
from src.storage.postgres_field_repo import PostgresFieldRepository
from src.storage.postgres_time_slot_repo import PostgresTimeSlotRepository
from src.storage.postgres_voucher_repo import PostgresVoucherRepository
from src.storage.redis_locks import RedisLockHelper

ACCOUNT_HEADER = "X-Account-Id"


@lru_cache
def get_settings() -> Settings:
    return load_settings()


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_lock_helper(request: Request) -> RedisLockHelper:
    return request.app.state.lock_helper


async def get_session(db: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """One session per request, committed or rolled back on exit."""
    async with db.session() as session:
        yield session


def get_availability_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AvailabilityService:
    return AvailabilityService.from_settings(
        settings,
        field_repo=PostgresFieldRepository(session),
        booking_repo=PostgresBookingRepository(session),
        time_slot_repo=PostgresTimeSlotRepository(session),
    )


def get_booking_flow_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
    availability: AvailabilityService = Depends(get_availability_service),
    lock_helper: RedisLockHelper = Depends(get_lock_helper),
) -> BookingFlowService:
    return BookingFlowService(
        availability=availability,
        booking_repo=PostgresBookingRepository(session),
        voucher_repo=PostgresVoucherRepository(session),
        lock_helper=lock_helper,
        cancellation_cutoff_minutes=settings.cancellation_cutoff_minutes,
    )


def get_field_service(session: AsyncSession = Depends(get_session)) -> FieldService:
    return FieldService(PostgresFieldRepository(session))


def get_time_slot_service(session: AsyncSession = Depends(get_session)) -> TimeSlotService:
    return TimeSlotService(PostgresTimeSlotRepository(session))


def get_permission_checker(settings: Settings = Depends(get_settings)) -> PermissionChecker:
    return PermissionChecker(settings.admin_ids)


async def get_current_account(
    x_account_id: Optional[str] = Header(default=None, alias=ACCOUNT_HEADER),
) -> UUID:
    """Caller identity from the account header."""
    if not x_account_id:
        raise Unauthorized("Authentication required.")
    try:
        return UUID(x_account_id)
    except ValueError:
        raise Unauthorized("Invalid account id.")


async def require_admin(
    request: Request,
    account_id: UUID = Depends(get_current_account),
    permissions: PermissionChecker = Depends(get_permission_checker),
) -> UUID:
    if not permissions.is_admin(account_id):
        AuditLogger.log_permission_denied(
            actor_id=account_id,
            resource_type="endpoint",
            resource_id=request.url.path,
            attempted_action=request.method,
        )
        raise Forbidden("Admin privileges required.")
    return account_id
