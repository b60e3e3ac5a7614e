"""FastAPI application factory and lifespan wiring."""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.routes import bookings, field_types, fields, health, pricing
from src.config.settings import Settings, load_settings
from src.logging import get_logger, setup_logging
from src.services.errors import BookingError
from src.services.expiration_job import BookingExpirationJob
from src.services.scheduler import SchedulerService
from src.storage.database import Database
from src.storage.postgres_booking_repo import PostgresBookingRepository
from src.storage.postgres_voucher_repo import PostgresVoucherRepository
from src.storage.redis_locks import RedisLockHelper

logger = get_logger(__name__)


def build_expiration_scheduler(db: Database, settings: Settings) -> SchedulerService:
    """Scheduler running the expiration job in its own session each tick."""

    async def run_expiration_job() -> dict[str, int]:
        async with db.session() as session:
            job = BookingExpirationJob(
                PostgresBookingRepository(session),
                PostgresVoucherRepository(session),
                pending_timeout_minutes=settings.pending_payment_timeout_minutes,
            )
            return await job.run()

    return SchedulerService(
        run_expiration_job, interval_seconds=settings.expiration_check_interval_seconds
    )


async def handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error=exc.error,
        status_code=exc.status_code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input with the same body as other invalid requests."""
    errors = exc.errors()
    message = "Invalid request."
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))

    logger.warning("request_validation_failed", path=request.url.path, errors=len(errors))
    return JSONResponse(
        status_code=400, content={"error": "invalid_request", "message": message}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; infrastructure is connected in the lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_settings = settings or load_settings()
        setup_logging(app_settings.log_level)

        logger.info(
            "application_starting",
            app_name=app_settings.app_name,
            environment=app_settings.environment,
        )

        db = Database(app_settings)
        await db.connect()

        lock_helper = RedisLockHelper(
            app_settings.redis_url, ttl_seconds=app_settings.redis_lock_ttl_seconds
        )
        await lock_helper.connect()

        app.state.db = db
        app.state.lock_helper = lock_helper

        scheduler = build_expiration_scheduler(db, app_settings)
        scheduler_task = asyncio.create_task(scheduler.start())

        try:
            yield
        finally:
            await scheduler.stop()
            scheduler_task.cancel()
            try:
                await scheduler_task
            except asyncio.CancelledError:
                pass

            await lock_helper.disconnect()
            await db.disconnect()
            logger.info("application_stopped")

    app = FastAPI(title="Field Booking API", version="1.0.0", lifespan=lifespan)
    app.add_exception_handler(BookingError, handle_booking_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    app.include_router(pricing.router)
    app.include_router(bookings.router)
    app.include_router(fields.router)
    app.include_router(field_types.router)
    app.include_router(health.router)

    return app
