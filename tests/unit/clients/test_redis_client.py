"""
Tests for RedisClient key prefixing and JSON helpers (mock connection).
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from sigil.clients.redis import RedisClient
from sigil.config import RedisConfig


def _client() -> tuple[RedisClient, AsyncMock]:
    client = RedisClient(RedisConfig(prefix="test"))
    conn = AsyncMock()
    client._client = conn
    return client, conn


class TestRedisClient:
    def test_not_connected(self):
        with pytest.raises(RuntimeError):
            _ = RedisClient(RedisConfig()).client

    @pytest.mark.asyncio
    async def test_set_json_with_ttl(self):
        client, conn = _client()
        await client.set_json("ipc:request:1", {"a": 1}, ttl=60)
        conn.setex.assert_awaited_once_with("test:ipc:request:1", 60, '{"a":1}')

    @pytest.mark.asyncio
    async def test_set_json_without_ttl(self):
        client, conn = _client()
        await client.set_json("k", [1, 2])
        conn.set.assert_awaited_once_with("test:k", "[1,2]")

    @pytest.mark.asyncio
    async def test_get_json(self):
        client, conn = _client()
        conn.get.return_value = '{"status": "success"}'
        assert await client.get_json("k") == {"status": "success"}
        conn.get.assert_awaited_once_with("test:k")

    @pytest.mark.asyncio
    async def test_get_json_missing(self):
        client, conn = _client()
        conn.get.return_value = None
        assert await client.get_json("k") is None

    @pytest.mark.asyncio
    async def test_delete_prefixes_every_key(self):
        client, conn = _client()
        await client.delete("a", "b")
        conn.delete.assert_awaited_once_with("test:a", "test:b")

    @pytest.mark.asyncio
    async def test_delete_nothing(self):
        client, conn = _client()
        await client.delete()
        conn.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close(self):
        client, conn = _client()
        await client.close()
        conn.aclose.assert_awaited_once()
        with pytest.raises(RuntimeError):
            _ = client.client
