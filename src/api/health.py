"""Health check for production monitoring.

Used by Docker health checks, deployment scripts and load balancers via
``GET /health``.
"""

import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import text

from src.logging import get_logger
from src.storage.database import Database
from src.storage.redis_locks import RedisLockHelper

logger = get_logger(__name__)

# Track application start time for uptime calculation
_start_time: float = time.time()

APP_VERSION: str = os.environ.get("APP_VERSION", "0.0.0-dev")


@dataclass
class DependencyHealth:
    """Health status for a single dependency."""

    status: str  # "healthy" or "unhealthy"
    response_time_ms: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status}
        if self.response_time_ms is not None:
            result["response_time_ms"] = self.response_time_ms
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class HealthCheckResult:
    """Complete health check response."""

    status: str  # "healthy", "degraded", or "unhealthy"
    version: str
    uptime_seconds: int
    timestamp: str
    dependencies: dict[str, DependencyHealth] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "status": self.status,
            "version": self.version,
            "uptime_seconds": self.uptime_seconds,
            "timestamp": self.timestamp,
            "dependencies": {name: dep.to_dict() for name, dep in self.dependencies.items()},
        }
        if self.warnings:
            result["warnings"] = self.warnings
        if self.errors:
            result["errors"] = self.errors
        return result


async def check_postgres_health(db: Optional[Database]) -> DependencyHealth:
    """Run ``SELECT 1`` through a fresh session."""
    if db is None or not db.is_connected:
        return DependencyHealth(status="unhealthy", error="Database not connected")

    start = time.perf_counter()
    try:
        async with db.session() as session:
            await session.execute(text("SELECT 1"))
        return DependencyHealth(
            status="healthy", response_time_ms=int((time.perf_counter() - start) * 1000)
        )
    except Exception as e:
        logger.error("postgres_health_check_failed", error=str(e))
        return DependencyHealth(status="unhealthy", error=f"Connection failed: {str(e)[:100]}")


async def check_redis_health(lock_helper: Optional[RedisLockHelper]) -> DependencyHealth:
    """Ping Redis over the lock helper's connection."""
    if lock_helper is None:
        return DependencyHealth(status="unhealthy", error="Redis not configured")

    start = time.perf_counter()
    try:
        await lock_helper.ping()
        return DependencyHealth(
            status="healthy", response_time_ms=int((time.perf_counter() - start) * 1000)
        )
    except Exception as e:
        logger.error("redis_health_check_failed", error=str(e))
        return DependencyHealth(status="unhealthy", error=f"Connection failed: {str(e)[:100]}")


async def perform_health_check(
    db: Optional[Database] = None,
    lock_helper: Optional[RedisLockHelper] = None,
) -> HealthCheckResult:
    """
    Check PostgreSQL and Redis.

    Bookings cannot be written without PostgreSQL, so a dead database makes
    the service unhealthy on its own. Losing only Redis degrades it.
    """
    result = HealthCheckResult(
        status="healthy",
        version=APP_VERSION,
        uptime_seconds=int(time.time() - _start_time),
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )

    result.dependencies["postgres"] = await check_postgres_health(db)
    result.dependencies["redis"] = await check_redis_health(lock_helper)

    if result.dependencies["postgres"].status == "unhealthy":
        result.status = "unhealthy"
        result.errors.append("Critical: postgres connection failed")
    if result.dependencies["redis"].status == "unhealthy":
        if result.status == "healthy":
            result.status = "degraded"
        result.warnings.append("Redis unavailable")

    return result


def get_http_status_code(health_status: str) -> int:
    """503 for unhealthy, 200 otherwise."""
    if health_status == "unhealthy":
        return 503
    return 200


def reset_start_time() -> None:
    """Reset start time for testing purposes."""
    global _start_time
    _start_time = time.time()
