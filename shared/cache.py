"""
Key-value cache backends shared by the feature flag and signature services.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import redis.asyncio as redis

from shared.logging import get_logger
from shared.errors import AccessLayerException


class KeyValueCache(ABC):
    """String cache with per-entry TTL. Entries expire only by TTL."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value that expires after ``ttl_seconds``."""


class RedisKeyValueCache(KeyValueCache):
    """Redis-backed cache."""

    def __init__(self, client: redis.Redis):
        self.redis = client
        self.logger = get_logger("shared.cache.redis")

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisKeyValueCache":
        """Create a cache bound to a Redis URL."""
        client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30
        )
        return cls(client)

    async def start(self):
        """Verify the connection."""
        try:
            await self.redis.ping()
            self.logger.info("Redis cache started")
        except redis.RedisError as e:
            self.logger.error("Failed to start Redis cache", error=str(e))
            raise AccessLayerException("REDIS_START_FAILED", str(e))

    async def stop(self):
        """Close the connection pool."""
        await self.redis.aclose()
        self.logger.info("Redis cache stopped")

    async def get(self, key: str) -> Optional[str]:
        value = await self.redis.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self.redis.set(key, value, ex=ttl_seconds)

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self.redis.ping()
            return True
        except redis.RedisError:
            return False


class InMemoryKeyValueCache(KeyValueCache):
    """Process-local cache for tests and local development."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._store: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._store[key] = (value, now + ttl_seconds)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._store.items() if now >= expires_at]
        for key in expired:
            del self._store[key]

    def __len__(self) -> int:
        return len(self._store)
