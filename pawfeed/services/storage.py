"""
Durable key-value storage for the canonical notification list.

Backends store raw UTF-8 bytes under a single key and raise StorageError
when the backend cannot serve a request, so callers can tell "absent"
apart from "unavailable".

Usage:
    from pawfeed.services.storage import RedisKeyValueStore

    store = RedisKeyValueStore("redis://localhost:6379/0")
    await store.set("notifications", b"[]")
    raw = await store.get("notifications")
"""

import logging
import time
from typing import Awaitable, Callable, Optional, Protocol
from enum import IntEnum

import redis.asyncio as redis
from redis.exceptions import RedisError

from pawfeed.exceptions import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Single-key atomic byte storage."""

    async def get(self, key: str) -> Optional[bytes]: ...

    async def set(self, key: str, value: bytes) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def close(self) -> None: ...


class CircuitState(IntEnum):
    """Whether the Redis notification store is being called."""

    CLOSED = 0  # Reads and writes go to Redis
    OPEN = 1  # Redis considered down; notification list calls fail fast
    HALF_OPEN = 2  # Next call decides whether Redis is back


class InMemoryKeyValueStore:
    """Process-local store, used when no Redis URL is configured and in tests."""

    def __init__(self):
        self._data: dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        return None


class RedisKeyValueStore:
    """
    Redis-backed notification storage.

    Keys are written without expiry; the notification list has no TTL.
    After ``failure_threshold`` consecutive Redis errors the store stops
    calling Redis for ``recovery_timeout`` seconds and every read or write
    of the notification list fails fast with StorageError. The first call
    after that window is let through; its outcome closes or reopens the
    circuit.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        client: Optional[redis.Redis] = None,
        failure_threshold: int = 5,
        recovery_timeout: int = 30,
    ):
        """
        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379)
            client: Pre-built client, takes precedence over redis_url
            failure_threshold: Consecutive Redis errors before calls fail fast
            recovery_timeout: Seconds to fail fast before trying Redis again
        """
        if client is None and not redis_url:
            raise ValueError("RedisKeyValueStore needs a redis_url or a client")

        self._redis_url = redis_url
        self._client = client
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout

        self._circuit_state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at = 0.0

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            # Raw bytes in and out; decoding is the caller's concern
            self._client = redis.from_url(self._redis_url, decode_responses=False)
        return self._client

    def _redis_allowed(self) -> bool:
        if self._circuit_state != CircuitState.OPEN:
            return True
        if time.time() - self._opened_at < self._recovery_timeout:
            return False
        self._circuit_state = CircuitState.HALF_OPEN
        logger.info("Retrying Redis for notification storage")
        return True

    def _redis_succeeded(self) -> None:
        if self._circuit_state == CircuitState.HALF_OPEN:
            logger.info("Redis notification storage reachable again")
        self._circuit_state = CircuitState.CLOSED
        self._failure_count = 0

    def _redis_failed(self, key: str, operation: str, error: RedisError) -> None:
        self._failure_count += 1
        logger.warning(f"Redis {operation} of {key!r} failed: {error}")

        retrying = self._circuit_state == CircuitState.HALF_OPEN
        if retrying or self._failure_count >= self._failure_threshold:
            self._circuit_state = CircuitState.OPEN
            self._opened_at = time.time()
            logger.warning(
                f"Notification storage unavailable, failing fast for "
                f"{self._recovery_timeout}s ({self._failure_count} consecutive Redis errors)"
            )

    async def _call(self, key: str, operation: str, command: Callable[[redis.Redis], Awaitable]):
        if not self._redis_allowed():
            raise StorageError(key, f"Redis unavailable, {operation} skipped")
        try:
            result = await command(self._get_client())
        except RedisError as e:
            self._redis_failed(key, operation, e)
            raise StorageError(key, str(e)) from e
        self._redis_succeeded()
        return result

    async def get(self, key: str) -> Optional[bytes]:
        value = await self._call(key, "read", lambda client: client.get(key))
        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    async def set(self, key: str, value: bytes) -> None:
        await self._call(key, "write", lambda client: client.set(key, value))

    async def delete(self, key: str) -> None:
        await self._call(key, "delete", lambda client: client.delete(key))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def get_stats(self) -> dict:
        return {
            "circuit_state": self._circuit_state.name,
            "failure_count": self._failure_count,
        }

    @property
    def is_available(self) -> bool:
        """False while notification storage calls are failing fast."""
        return self._redis_allowed()
