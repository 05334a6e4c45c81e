"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from aeroweather.api import deps
from aeroweather.api.deps import get_analysis_service, get_aviationweather_client
from aeroweather.clients.aviationweather import AviationWeatherClient
from aeroweather.core.config import Settings
from aeroweather.main import create_app
from aeroweather.services.analysis_service import AnalysisService
from tests.fixtures import (
    BASE_URL,
    SAMPLE_METAR,
    SAMPLE_STATION,
    SAMPLE_TAF,
    analysis_json,
    fake_openai,
    make_transport,
)


@pytest.fixture(autouse=True)
def reset_rate_limit(monkeypatch):
    monkeypatch.setattr(deps, "_rate_window", 0)
    deps._rate_bucket.clear()
    yield
    deps._rate_bucket.clear()


@pytest.fixture
def settings():
    return Settings(_env_file=None, analysis_cache_in_memory=True, analysis_timeout_seconds=1.0)


@pytest.fixture
def upstream():
    """Upstream responses by product; tests mutate this before calling."""
    return {"metar": [SAMPLE_METAR], "taf": [SAMPLE_TAF], "station": [SAMPLE_STATION]}


@pytest.fixture
def openai_client():
    return fake_openai(content=analysis_json())


@pytest.fixture
async def test_app(settings, upstream, openai_client):
    """App with aviationweather and OpenAI swapped for fakes."""
    app = create_app(settings)
    http = httpx.AsyncClient(transport=make_transport(upstream))

    app.dependency_overrides[get_aviationweather_client] = lambda: AviationWeatherClient(
        base_url=BASE_URL, http_client=http
    )
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(
        api_key="sk-test", client=openai_client
    )
    yield app

    app.dependency_overrides.clear()
    await http.aclose()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
