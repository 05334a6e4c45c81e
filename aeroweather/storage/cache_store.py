from __future__ import annotations

import time
from typing import Optional, Protocol

from redis.asyncio import Redis


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...

    async def close(self) -> None: ...


class TTLCache:
    """In-process store; per instance, lost on restart."""

    def __init__(self, default_ttl: int = 900, max_entries: int = 1024):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._store: dict[str, tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[str]:
        item = self._store.get(key)
        if not item:
            return None
        exp, val = item
        if time.time() > exp:
            self._store.pop(key, None)
            return None
        return val

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        if len(self._store) >= self.max_entries:
            self._evict_expired()
        if len(self._store) >= self.max_entries:
            # still full: drop the entry closest to expiry
            oldest = min(self._store, key=lambda k: self._store[k][0])
            self._store.pop(oldest, None)
        self._store[key] = (time.time() + ttl, value)

    async def close(self) -> None:
        self._store.clear()

    def _evict_expired(self) -> None:
        now = time.time()
        for k in [k for k, (exp, _) in self._store.items() if now > exp]:
            self._store.pop(k, None)


class RedisStore:
    def __init__(
        self,
        host: str,
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        timeout_seconds: float = 2.0,
        client: Optional[Redis] = None,
    ):
        self._client = client or Redis(
            host=host,
            port=port,
            password=password or None,
            db=db,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
            decode_responses=True,
        )

    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._client.set(key, value, ex=ttl)

    async def close(self) -> None:
        await self._client.aclose()
