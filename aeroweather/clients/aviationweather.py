from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from aeroweather.core.config import settings as default_settings
from aeroweather.core.errors import UpstreamError
from aeroweather.models.weather import ForecastReport, StationInfo, WeatherObservation

logger = logging.getLogger(__name__)

REPORT_TYPES = ("metar", "taf", "station")


def clean_station(st: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", (st or "").upper())


def clean_ids(ids: str) -> List[str]:
    out = [clean_station(s) for s in (ids or "").split(",")]
    return [s for s in out if s]


class AviationWeatherClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        user_agent: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or default_settings.aviationweather_base_url).rstrip("/")
        self.timeout = timeout_seconds or default_settings.http_timeout_seconds
        self.user_agent = user_agent or default_settings.user_agent
        self._http = http_client

    async def _get(self, url: str, params: dict) -> httpx.Response:
        headers = {"User-Agent": self.user_agent}
        if self._http is not None:
            return await self._http.get(url, params=params, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params, headers=headers)

    async def fetch(self, report_type: str, ids: str) -> Any:
        """Fetch one product as parsed JSON.

        Returns None when upstream has no data (204 / empty body). Raises
        UpstreamError on transport failure, non-2xx status or a body that
        isn't JSON.
        """
        if report_type not in REPORT_TYPES:
            raise ValueError(f"type must be one of {REPORT_TYPES}")

        url = f"{self.base_url}/{report_type}"
        params = {"ids": ids, "format": "json"}
        try:
            r = await self._get(url, params)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to fetch {report_type}: {type(exc).__name__}") from exc

        if r.is_error:
            raise UpstreamError(f"Upstream error: {r.status_code}", upstream_status=r.status_code)

        # AWC returns 204 with no body when there is nothing to report
        text = r.text
        if r.status_code == 204 or not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            raise UpstreamError(f"Upstream returned invalid JSON for {report_type}") from exc

    async def _first_record(self, report_type: str, icao: str) -> Optional[dict]:
        icao = clean_station(icao)
        if not icao:
            return None
        data = await self.fetch(report_type, icao)
        if not isinstance(data, list) or not data:
            return None
        row = data[0]
        return row if isinstance(row, dict) else None

    async def fetch_metar(self, icao: str) -> WeatherObservation | None:
        row = await self._first_record("metar", icao)
        if row is None:
            return None
        try:
            return WeatherObservation.model_validate(row)
        except ValidationError as exc:
            logger.warning("Unreadable METAR record for %s: %s", icao, exc)
            return None

    async def fetch_taf(self, icao: str) -> ForecastReport | None:
        row = await self._first_record("taf", icao)
        if row is None:
            return None
        try:
            return ForecastReport.model_validate(row)
        except ValidationError as exc:
            logger.warning("Unreadable TAF record for %s: %s", icao, exc)
            return None

    async def fetch_station(self, icao: str) -> StationInfo | None:
        row = await self._first_record("station", icao)
        if row is None:
            return None
        try:
            return StationInfo.model_validate(row)
        except ValidationError as exc:
            logger.warning("Unreadable station record for %s: %s", icao, exc)
            return None
