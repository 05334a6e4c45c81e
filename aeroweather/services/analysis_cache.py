"""Best-effort cache in front of the AI analysis call.

Keys are built from station id + observation/issue instant only, never from
the raw report text, so a byte-identical re-issue of the same METAR/TAF hits
the cache and a newer observation misses it. Entries expire after 900 s,
inside the usual 15 minute METAR cadence.

Nothing here is allowed to fail a request: store errors on read are misses,
store errors on write are logged and dropped. Two concurrent misses for the
same key will both compute; that is accepted.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from aeroweather.core.config import Settings
from aeroweather.models.analysis import AnalysisResult
from aeroweather.models.weather import ForecastReport, WeatherObservation
from aeroweather.storage.cache_store import CacheStore, RedisStore, TTLCache
from aeroweather.utils.time import resolve_instant

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 900
KEY_PREFIX = "analysis:v1"
NONE_SENTINEL = "none"


def _instant_token(value: Any) -> str:
    parsed = resolve_instant(value)
    if parsed.instant is not None:
        return parsed.instant.strftime("%Y-%m-%dT%H:%M:%SZ")
    text = str(value).strip() if value is not None else ""
    return text or NONE_SENTINEL


def _part(station_id: Optional[str], instant: Any) -> str:
    return f"{station_id or NONE_SENTINEL}@{_instant_token(instant)}"


def analysis_cache_key(
    observation: Optional[WeatherObservation],
    forecast: Optional[ForecastReport],
) -> str:
    metar = _part(observation.station_id, observation.obs_time) if observation else NONE_SENTINEL
    taf = _part(forecast.station_id, forecast.issue_time) if forecast else NONE_SENTINEL
    return f"{KEY_PREFIX}:metar={metar}:taf={taf}"


class AnalysisCache:
    def __init__(self, store: Optional[CacheStore] = None, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.store = store
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisCache":
        """Build the cache for this deployment; any problem means 'disabled'."""
        ttl = settings.analysis_cache_ttl_seconds
        try:
            if settings.redis_host:
                store = RedisStore(
                    host=settings.redis_host,
                    port=settings.redis_port,
                    password=settings.redis_password,
                    db=settings.redis_db,
                )
                logger.info("Analysis cache: redis at %s:%s", settings.redis_host, settings.redis_port)
                return cls(store, ttl)
            if settings.analysis_cache_in_memory:
                logger.info("Analysis cache: in-memory")
                return cls(TTLCache(default_ttl=ttl), ttl)
        except Exception as exc:
            logger.warning("Analysis cache disabled, store init failed: %s", exc)
            return cls(None, ttl)
        logger.info("Analysis cache disabled (no store configured)")
        return cls(None, ttl)

    @property
    def enabled(self) -> bool:
        return self.store is not None

    def key(self, observation: Optional[WeatherObservation], forecast: Optional[ForecastReport]) -> str:
        return analysis_cache_key(observation, forecast)

    async def get(self, key: str) -> Optional[AnalysisResult]:
        if self.store is None:
            return None
        try:
            raw = await self.store.get(key)
        except Exception as exc:
            logger.warning("Analysis cache read failed for %s: %s", key, exc)
            return None
        if not raw:
            return None
        try:
            return AnalysisResult.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None

    async def put(self, key: str, value: AnalysisResult, ttl_seconds: Optional[int] = None) -> None:
        if self.store is None:
            return
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        try:
            await self.store.set(key, value.model_dump_json(), ttl)
        except Exception as exc:
            logger.warning("Analysis cache write failed for %s: %s", key, exc)

    async def fetch_or_compute(
        self,
        observation: Optional[WeatherObservation],
        forecast: Optional[ForecastReport],
        compute_fn: Callable[[], Awaitable[AnalysisResult]],
    ) -> AnalysisResult:
        key = self.key(observation, forecast)
        cached = await self.get(key)
        if cached is not None:
            logger.debug("Analysis cache hit: %s", key)
            return cached

        result = await compute_fn()
        await self.put(key, result)
        return result

    async def close(self) -> None:
        if self.store is None:
            return
        try:
            await self.store.close()
        except Exception as exc:
            logger.warning("Closing analysis cache store failed: %s", exc)
