"""Builds the station display model from METAR, TAF, station info and analysis."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from aeroweather.clients.aviationweather import AviationWeatherClient, clean_station
from aeroweather.core.errors import StationNotFoundError, UpstreamError
from aeroweather.models.analysis import AnalysisResult
from aeroweather.models.report import (
    AnalysisView,
    CloudView,
    ForecastPeriodView,
    ForecastView,
    InstantView,
    ObservationView,
    TimeView,
    VisibilityView,
    WeatherReport,
    WindView,
)
from aeroweather.models.weather import ForecastReport, StationInfo, WeatherObservation
from aeroweather.services.analysis_cache import AnalysisCache
from aeroweather.services.analysis_service import AnalysisService
from aeroweather.utils.time import build_time_display, resolve_instant
from aeroweather.utils.units import (
    classify_visibility,
    clean_station_name,
    cloud_description,
    clouds_summary,
    feet_to_meters,
    format_visibility_value,
    knots_to_ms,
    wind_direction_label,
)

logger = logging.getLogger(__name__)

ANALYSIS_RETRY_URL = "/api/analyze-weather"


def _instant_view(value, now: Optional[datetime], language: str) -> InstantView:
    parsed = resolve_instant(value, now=now, language=language)
    return InstantView(utc=parsed.display, relative=parsed.relative)


def _visibility_view(value, language: str) -> VisibilityView:
    cls = classify_visibility(value)
    return VisibilityView(
        value=format_visibility_value(value, language),
        tier=cls.tier,
        color_hint=cls.color_hint,
    )


def build_observation_view(obs: WeatherObservation, now: Optional[datetime] = None, language: str = "en") -> ObservationView:
    return ObservationView(
        raw=obs.raw_ob,
        observed=_instant_view(obs.obs_time, now, language),
        temperature=obs.temp,
        dewpoint=obs.dewp,
        wind=WindView(
            direction=wind_direction_label(obs.wdir, language),
            speed_ms=knots_to_ms(obs.wspd),
            gust_ms=knots_to_ms(obs.wgst),
        ),
        visibility=_visibility_view(obs.visib, language),
        altimeter=obs.altim,
        clouds=[
            CloudView(
                cover=c.cover,
                description=cloud_description(c.cover, language),
                base_m=feet_to_meters(c.base),
                type=c.type,
            )
            for c in obs.clouds
        ],
        clouds_summary=clouds_summary(obs.clouds, language),
    )


def build_forecast_view(taf: ForecastReport, now: Optional[datetime] = None, language: str = "en") -> ForecastView:
    return ForecastView(
        raw=taf.raw_taf,
        issued=_instant_view(taf.issue_time, now, language),
        valid_from=_instant_view(taf.valid_time_from, now, language),
        valid_to=_instant_view(taf.valid_time_to, now, language),
        periods=[
            ForecastPeriodView(
                valid_from=_instant_view(p.time_from, now, language),
                valid_to=_instant_view(p.time_to, now, language),
                change_indicator=p.change_indicator,
                visibility=_visibility_view(p.visib, language) if p.visib is not None else None,
                weather=p.wx_string,
                clouds_summary=clouds_summary(p.clouds, language),
            )
            for p in taf.periods
        ],
    )


class ReportService:
    def __init__(
        self,
        aviationweather: AviationWeatherClient,
        analysis: AnalysisService,
        analysis_cache: AnalysisCache,
        language: str = "en",
        analysis_timeout_seconds: float = 25.0,
    ):
        self.aviationweather = aviationweather
        self.analysis = analysis
        self.analysis_cache = analysis_cache
        self.language = language
        self.analysis_timeout_seconds = analysis_timeout_seconds

    async def _optional_taf(self, code: str) -> Optional[ForecastReport]:
        try:
            return await self.aviationweather.fetch_taf(code)
        except UpstreamError as exc:
            # some stations have no TAF at all; not worth failing the page
            logger.warning("TAF unavailable for %s: %s", code, exc.message)
            return None

    async def _optional_station(self, code: str) -> Optional[StationInfo]:
        try:
            return await self.aviationweather.fetch_station(code)
        except UpstreamError as exc:
            logger.warning("Station info unavailable for %s: %s", code, exc.message)
            return None

    async def analyze(
        self,
        metar: Optional[WeatherObservation],
        taf: Optional[ForecastReport],
    ) -> AnalysisResult:
        return await self.analysis_cache.fetch_or_compute(
            metar, taf, lambda: self.analysis.analyze(metar, taf)
        )

    async def _try_analyze(
        self,
        code: str,
        metar: Optional[WeatherObservation],
        taf: Optional[ForecastReport],
    ) -> Optional[AnalysisResult]:
        try:
            return await asyncio.wait_for(self.analyze(metar, taf), timeout=self.analysis_timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Analysis timed out for %s", code)
        except Exception as exc:
            # weather is already good to show; analysis is just omitted
            logger.warning("Analysis failed for %s: %s", code, exc, exc_info=True)
        return None

    async def generate(self, station: str, include_analysis: bool = True, now: Optional[datetime] = None) -> WeatherReport:
        code = clean_station(station)
        if not code:
            raise ValueError("ids is required")

        # 1) Primary data, concurrently. METAR failures propagate.
        metar, taf, station_info = await asyncio.gather(
            self.aviationweather.fetch_metar(code),
            self._optional_taf(code),
            self._optional_station(code),
        )

        if metar is None and taf is None:
            raise StationNotFoundError(f"Station {code} not found or no data")

        # 2) Analysis, independent of the weather blocks
        analysis_result: Optional[AnalysisResult] = None
        if include_analysis:
            analysis_result = await self._try_analyze(code, metar, taf)
            analysis = AnalysisView(
                status="ready" if analysis_result else "omitted",
                result=analysis_result,
                retry_url=None if analysis_result else ANALYSIS_RETRY_URL,
            )
        else:
            analysis = AnalysisView(status="skipped", retry_url=ANALYSIS_RETRY_URL)

        observed = resolve_instant(metar.obs_time if metar else None, now=now, language=self.language)
        time_display = build_time_display(
            observed,
            analysis_result.local_time if analysis_result else None,
            language=self.language,
        )

        display_name = (analysis_result.airport_name if analysis_result else "") or clean_station_name(
            station_info.name if station_info else ""
        )

        return WeatherReport(
            station_id=code,
            display_name=display_name or code,
            station=station_info,
            observation=build_observation_view(metar, now, self.language) if metar else None,
            forecast=build_forecast_view(taf, now, self.language) if taf else None,
            time=TimeView(
                date=time_display.date,
                time=time_display.time,
                sub_label=time_display.sub_label,
                is_local=time_display.is_local,
                utc_label=time_display.utc_label,
            ),
            analysis=analysis,
        )
