"""Tests for the cache backing stores."""

from __future__ import annotations

from unittest.mock import AsyncMock

from aeroweather.storage.cache_store import RedisStore, TTLCache


class TestTTLCache:
    async def test_set_and_get(self):
        store = TTLCache(default_ttl=60)
        await store.set("a", "1")
        assert await store.get("a") == "1"
        assert await store.get("missing") is None

    async def test_expired_entries_vanish(self):
        store = TTLCache()
        await store.set("a", "1", ttl=-1)
        assert await store.get("a") is None

    async def test_bounded_size(self):
        store = TTLCache(max_entries=2)
        await store.set("a", "1", ttl=10)
        await store.set("b", "2", ttl=20)
        await store.set("c", "3", ttl=30)
        assert await store.get("a") is None
        assert await store.get("b") == "2"
        assert await store.get("c") == "3"

    async def test_close_clears(self):
        store = TTLCache()
        await store.set("a", "1")
        await store.close()
        assert await store.get("a") is None


class TestRedisStore:
    async def test_delegates_to_client(self):
        client = AsyncMock()
        client.get.return_value = '{"x": 1}'
        store = RedisStore(host="unused", client=client)

        await store.set("k", "v", 900)
        client.set.assert_awaited_once_with("k", "v", ex=900)

        assert await store.get("k") == '{"x": 1}'
        client.get.assert_awaited_once_with("k")

        await store.close()
        client.aclose.assert_awaited_once()
