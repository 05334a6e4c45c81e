"""Tests for the weather proxy endpoint."""

from __future__ import annotations

import httpx

from tests.fixtures import SAMPLE_METAR


class TestWeatherProxy:
    async def test_metar_passthrough(self, client):
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "uaaa"})
        assert resp.status_code == 200
        assert resp.json() == [SAMPLE_METAR]
        assert "no-store" in resp.headers["cache-control"]
        assert resp.headers["pragma"] == "no-cache"

    async def test_missing_params(self, client):
        assert (await client.get("/api/weather", params={"type": "metar"})).status_code == 400
        assert (await client.get("/api/weather", params={"ids": "UAAA"})).status_code == 400
        assert (await client.get("/api/weather")).status_code == 400

    async def test_invalid_type(self, client):
        resp = await client.get("/api/weather", params={"type": "pirep", "ids": "UAAA"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid type parameter"

    async def test_invalid_ids(self, client):
        resp = await client.get("/api/weather", params={"type": "metar", "ids": ",;,"})
        assert resp.status_code == 400

    async def test_no_data_is_empty_list(self, client, upstream):
        upstream.pop("taf")
        resp = await client.get("/api/weather", params={"type": "taf", "ids": "UAAA"})
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_upstream_404(self, client, upstream):
        upstream["metar"] = 404
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "UAAA"})
        assert resp.status_code == 404

    async def test_upstream_failure_is_502(self, client, upstream):
        upstream["taf"] = 500
        resp = await client.get("/api/weather", params={"type": "taf", "ids": "UAAA"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Upstream error: 500"

    async def test_transport_failure_is_502(self, client, upstream):
        upstream["metar"] = httpx.ConnectTimeout("timed out")
        resp = await client.get("/api/weather", params={"type": "metar", "ids": "UAAA"})
        assert resp.status_code == 502

    async def test_station_failure_masked(self, client, upstream):
        upstream["station"] = 500
        resp = await client.get("/api/weather", params={"type": "station", "ids": "UAAA"})
        assert resp.status_code == 200
        assert resp.json() is None

    async def test_station_no_data_is_null(self, client, upstream):
        upstream.pop("station")
        resp = await client.get("/api/weather", params={"type": "station", "ids": "UAAA"})
        assert resp.status_code == 200
        assert resp.json() is None
