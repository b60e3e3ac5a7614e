"""Redis-based distributed locks serializing bookings per field."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import UUID, uuid4

import redis.asyncio as redis

LOCK_PREFIX = "fieldbook:lock:field"

# Delete the key only if this holder still owns it
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class RedisLockHelper:
    """Helper for Redis-based distributed locking."""

    def __init__(self, redis_url: str, ttl_seconds: int = 5):
        """Initialize Redis lock helper."""
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Establish Redis connection."""
        self._client = await redis.from_url(self.redis_url, encoding="utf-8")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()

    @staticmethod
    def lock_key(field_id: UUID) -> str:
        return f"{LOCK_PREFIX}:{field_id}"

    @asynccontextmanager
    async def acquire_field_lock(
        self, field_id: UUID
    ) -> AsyncGenerator[bool, None]:
        """Acquire exclusive lock on a field for the check-and-insert of a booking."""
        if not self._client:
            raise RuntimeError("Redis client not connected")

        lock_key = self.lock_key(field_id)
        token = uuid4().hex
        acquired = False

        try:
            # SET NX: only one holder per field; EX bounds a crashed holder
            acquired = await self._client.set(
                lock_key, token, ex=self.ttl_seconds, nx=True
            )
            yield bool(acquired)
        finally:
            if acquired:
                await self._client.eval(_RELEASE_SCRIPT, 1, lock_key, token)

    async def ping(self) -> bool:
        """Round-trip to Redis; raises when unreachable."""
        if not self._client:
            raise RuntimeError("Redis client not connected")

        return bool(await self._client.ping())
