"""Sample upstream payloads and fakes shared by the test suite."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

import httpx

BASE_URL = "https://aviationweather.test/api/data"

# 1700000000 = 2023-11-14 22:13:20 UTC
SAMPLE_METAR = {
    "icaoId": "UAAA",
    "obsTime": 1700000000,
    "reportTime": "2023-11-14 22:00:00",
    "temp": -2.0,
    "dewp": -5.0,
    "wdir": "VRB",
    "wspd": 4,
    "wgst": None,
    "visib": 9999,
    "altim": 1021.0,
    "rawOb": "METAR UAAA 142200Z VRB02MPS 9999 BKN030CB M02/M05 Q1021 NOSIG",
    "clouds": [{"cover": "BKN", "base": 3000, "type": "CB"}],
}

SAMPLE_TAF = {
    "icaoId": "UAAA",
    "issueTime": "2023-11-14T21:00:00Z",
    "validTimeFrom": 1700002800,
    "validTimeTo": 1700100000,
    "rawTAF": "TAF UAAA 142100Z 1423/1524 VRB02MPS 9999 BKN030 TEMPO 1500/1506 3000 -SN OVC020",
    "fcsts": [
        {
            "timeFrom": 1700002800,
            "timeTo": 1700020800,
            "fcstChange": "TEMPO",
            "visib": "6+",
            "wxString": "-SN",
            "clouds": [{"cover": "OVC", "base": 2000}],
        }
    ],
}

SAMPLE_STATION = {
    "icaoId": "UAAA",
    "site": "Almaty International Airport",
    "lat": 43.35,
    "lon": 77.04,
    "elev": 681,
    "country": "KZ",
}

ANALYSIS_PAYLOAD = {
    "summary": "Light variable wind, good visibility, broken cumulonimbus at 900 m.",
    "conditions_rating": "Difficult",
    "hazards": ["Cumulonimbus"],
    "forecast_summary": "Light snow possible after midnight with lowering cloud.",
    "airport_name": "Almaty",
    "local_time": "15.11 03:13",
}


def make_transport(responses: dict) -> httpx.MockTransport:
    """Route aviationweather requests by product ("metar", "taf", "station").

    Values: an int is returned as that bare status code, an Exception is
    raised, anything else is served as a 200 JSON body. Missing products get
    a 204 like the real API.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        product = request.url.path.rsplit("/", 1)[-1]
        if product not in responses:
            return httpx.Response(204)
        value = responses[product]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, int):
            return httpx.Response(value, text="upstream says no")
        return httpx.Response(200, json=value)

    return httpx.MockTransport(handler)


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``."""

    def __init__(self, content: str | None = None, exc: Exception | None = None, delay: float = 0.0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


class FakeOpenAI:
    """Stands in for ``AsyncOpenAI``; only chat completions and close."""

    def __init__(self, completions: FakeCompletions):
        self.chat = SimpleNamespace(completions=completions)
        self.closed = False

    async def close(self):
        self.closed = True


def fake_openai(content: str | None = None, exc: Exception | None = None, delay: float = 0.0):
    return FakeOpenAI(FakeCompletions(content=content, exc=exc, delay=delay))


def analysis_json(**overrides) -> str:
    return json.dumps({**ANALYSIS_PAYLOAD, **overrides})
