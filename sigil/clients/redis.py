"""
Sigil — Redis Client

Async Redis for shared IPC artifacts: validation requests and the responses
written back by external validator processes.
"""

from __future__ import annotations

from typing import Any

import orjson
import structlog
from redis.asyncio import Redis

from sigil.config import RedisConfig

logger = structlog.get_logger()


class RedisClient:
    """
    Async Redis client with key prefixing for multi-instance support.
    """

    def __init__(self, config: RedisConfig) -> None:
        self._config = config
        self._client: Redis | None = None

    async def connect(self) -> None:
        """Establish Redis connection."""
        self._client = Redis.from_url(
            self._config.full_url,
            decode_responses=True,
        )
        # Verify connectivity
        await self._client.ping()
        logger.info("redis_connected", prefix=self._config.prefix)

    async def close(self) -> None:
        """Close the connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("redis_disconnected")

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis client not connected. Call connect() first.")
        return self._client

    def _key(self, key: str) -> str:
        """Prefix a key with the instance prefix."""
        return f"{self._config.prefix}:{key}"

    # ─── JSON Helpers ─────────────────────────────────────────────

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a JSON-serialisable value."""
        raw = orjson.dumps(value).decode()
        if ttl:
            await self.client.setex(self._key(key), ttl, raw)
        else:
            await self.client.set(self._key(key), raw)

    async def get_json(self, key: str) -> Any | None:
        """Retrieve a JSON value."""
        raw = await self.client.get(self._key(key))
        if raw is None:
            return None
        return orjson.loads(raw)

    async def delete(self, *keys: str) -> None:
        """Delete one or more keys."""
        if keys:
            await self.client.delete(*(self._key(k) for k in keys))
