"""Tests for the access gate middleware and key verification."""

from __future__ import annotations

import pytest

from aeroweather.api.access import AccessGate, GateDecision
from aeroweather.core.config import Settings


class TestGateDecision:
    def test_unconfigured_allows_everything(self):
        gate = AccessGate(None)
        assert gate.evaluate(None, None) is GateDecision.ALLOW
        assert gate.evaluate("anything", None) is GateDecision.ALLOW

    def test_matching_key_sets_cookie(self):
        assert AccessGate("s3cret").evaluate("s3cret", None) is GateDecision.ALLOW_AND_SET_COOKIE

    def test_cookie_allows(self):
        assert AccessGate("s3cret").evaluate(None, "true") is GateDecision.ALLOW

    def test_denied(self):
        gate = AccessGate("s3cret")
        assert gate.evaluate(None, None) is GateDecision.DENY
        assert gate.evaluate("wrong", None) is GateDecision.DENY
        assert gate.evaluate("wrong", "false") is GateDecision.DENY


@pytest.fixture
def settings():
    return Settings(_env_file=None, access_key="s3cret", analysis_cache_in_memory=True)


class TestGateMiddleware:
    async def test_denied_without_key(self, client):
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "UAAA"})
        assert resp.status_code == 403
        assert resp.headers["content-type"].startswith("text/html")
        assert "Access restricted" in resp.text
        assert "set-cookie" not in resp.headers

    async def test_wrong_key_denied(self, client):
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "UAAA", "key": "nope"})
        assert resp.status_code == 403
        assert "set-cookie" not in resp.headers

    async def test_matching_key_sets_cookie(self, client):
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "UAAA", "key": "s3cret"})
        assert resp.status_code == 200
        cookie = resp.headers["set-cookie"].lower()
        assert "authorized=true" in cookie
        assert "httponly" in cookie
        assert "secure" in cookie
        assert "samesite=strict" in cookie
        assert "max-age=86400" in cookie

    async def test_cookie_allows_without_key(self, client):
        resp = await client.get(
            "/api/weather",
            params={"type": "metar", "ids": "UAAA"},
            headers={"Cookie": "authorized=true"},
        )
        assert resp.status_code == 200
        assert "set-cookie" not in resp.headers

    async def test_health_not_gated(self, client):
        resp = await client.get("/healthz")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}

    async def test_cors_preflight_not_gated(self, client):
        resp = await client.options(
            "/api/analyze-weather",
            headers={"Origin": "https://example.org", "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


class TestOpenGate:
    @pytest.fixture
    def settings(self):
        return Settings(_env_file=None, access_key=None, analysis_cache_in_memory=True)

    async def test_no_secret_allows_everything(self, client):
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "UAAA"})
        assert resp.status_code == 200
        assert "set-cookie" not in resp.headers

    async def test_verify_key_without_secret(self, client):
        resp = await client.get("/api/verify-key", params={"key": "whatever"})
        assert resp.status_code == 200
        assert resp.json() == {"authorized": True}


class TestVerifyKey:
    async def test_match(self, client):
        resp = await client.get("/api/verify-key", params={"key": "s3cret"})
        assert resp.status_code == 200
        assert resp.json() == {"authorized": True}

    async def test_mismatch(self, client):
        resp = await client.get("/api/verify-key", params={"key": "guess"})
        assert resp.status_code == 403
        assert resp.json() == {"authorized": False}

    async def test_missing_key(self, client):
        resp = await client.get("/api/verify-key")
        assert resp.status_code == 403
