"""Tests for the per-IP rate limiter."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from aeroweather.api import deps
from aeroweather.core.config import Settings


def _request(ip: str):
    return SimpleNamespace(client=SimpleNamespace(host=ip))


class TestRateLimit:
    async def test_counts_per_ip(self):
        settings = Settings(_env_file=None, rate_limit_per_minute=1)
        await deps.rate_limit(_request("10.0.0.1"), settings)
        await deps.rate_limit(_request("10.0.0.2"), settings)
        with pytest.raises(HTTPException) as exc:
            await deps.rate_limit(_request("10.0.0.1"), settings)
        assert exc.value.status_code == 429

    async def test_stale_windows_are_dropped(self):
        settings = Settings(_env_file=None)
        for i in range(1000):
            deps._rate_bucket[f"10.0.{i // 256}.{i % 256}"] = (0, 1)

        await deps.rate_limit(_request("192.0.2.1"), settings)

        assert list(deps._rate_bucket) == ["192.0.2.1"]
