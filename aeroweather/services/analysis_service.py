from __future__ import annotations

import json
import logging
from typing import List, Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from aeroweather.core.config import Settings
from aeroweather.core.errors import AnalysisError, ConfigurationError
from aeroweather.models.analysis import ANALYSIS_RESPONSE_SCHEMA, AnalysisResult
from aeroweather.models.weather import ForecastReport, WeatherObservation
from aeroweather.utils.labels import label
from aeroweather.utils.time import resolve_instant

logger = logging.getLogger(__name__)


METEOROLOGIST_SYSTEM_PROMPT = (
    "You are an aviation meteorologist. You read raw METAR and TAF reports and "
    "explain them briefly and factually. Use only the data provided. Do not invent "
    "weather, times or locations. Answer with JSON matching the requested schema."
)

# Kazakhstan moved all stations to a single UTC+5 zone; models still quote UTC+6.
TIMEZONE_NOTES = (
    "Kazakhstan airports (UAAA, UACC, UAST, UATE and others) use a single UTC+5 "
    "time zone; do not use the old UTC+6 offset."
)

NO_DATA = "No data"


def _obs_time_context(observation: Optional[WeatherObservation]) -> str:
    if observation is None or observation.obs_time is None:
        return "Unknown"
    parsed = resolve_instant(observation.obs_time)
    if parsed.instant is None:
        return str(observation.obs_time)
    return parsed.instant.isoformat().replace("+00:00", "Z")


def _chat_completions(
    client: AsyncOpenAI,
    user_prompt: str,
    model: str,
    max_tokens: int,
    system_prompt: str,
):
    return client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        max_completion_tokens=max_tokens,
        response_format={
            "type": "json_schema",
            "json_schema": {"name": "weather_analysis", "strict": True, "schema": ANALYSIS_RESPONSE_SCHEMA},
        },
    )


class AnalysisService:
    """Turns a METAR/TAF pair into an AnalysisResult via the OpenAI API.

    The OpenAI client is created on first use and reused afterwards; a missing
    API key only surfaces (as ConfigurationError) when an analysis is requested.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 20.0,
        max_tokens: int = 600,
        language: str = "en",
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.language = language
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisService":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.openai_timeout_seconds,
            max_tokens=settings.openai_max_tokens,
            language=settings.display_language,
        )

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("Server configuration error: OPENAI_API_KEY is not set")
            # single attempt; the caller decides whether to retry
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_seconds, max_retries=0)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    def _build_prompt(
        self,
        observation: Optional[WeatherObservation],
        forecast: Optional[ForecastReport],
    ) -> str:
        airport = (observation.station_id if observation else None) or (forecast.station_id if forecast else None) or "Unknown"
        ratings: List[str] = label("ratings", self.language)
        language_name = label("language_name", self.language)

        lines = []
        lines.append(f"Analyse the weather for airport {airport}.")
        lines.append(TIMEZONE_NOTES)
        lines.append("")
        lines.append(f"Observation date/time (UTC): {_obs_time_context(observation)}")
        lines.append(f"RAW METAR: {observation.raw_ob if observation and observation.raw_ob else NO_DATA}")
        lines.append(f"RAW TAF: {forecast.raw_taf if forecast and forecast.raw_taf else NO_DATA}")
        lines.append("")
        lines.append(f"Write all text in {language_name}. Return JSON with:")
        lines.append("1. summary: one sentence describing the current weather.")
        lines.append(f"2. conditions_rating: exactly one of {' / '.join(ratings)}.")
        lines.append("3. hazards: list of hazardous phenomena (thunderstorm, fog, strong crosswind, wind shear...); empty list if none.")
        lines.append("4. forecast_summary: 2-3 sentences on the next few hours.")
        lines.append("5. airport_name: only the city name, not the full airport name.")
        lines.append(
            "6. local_time: local time of the METAR, from the UTC observation time and the "
            "airport time zone, formatted 'DD.MM HH:MM' (e.g. '24.05 14:30'). Day and month "
            "must match the observation date; use 'XX.XX XX:XX' if unknown."
        )
        return "\n".join(lines)

    async def analyze(
        self,
        observation: Optional[WeatherObservation],
        forecast: Optional[ForecastReport],
    ) -> AnalysisResult:
        if observation is None and forecast is None:
            raise ValueError("No weather data provided")

        client = self.client
        prompt = self._build_prompt(observation, forecast)

        try:
            resp = await _chat_completions(
                client,
                prompt,
                model=self.model,
                max_tokens=self.max_tokens,
                system_prompt=METEOROLOGIST_SYSTEM_PROMPT,
            )
        except openai.OpenAIError as exc:
            raise AnalysisError(f"Failed to analyze weather: {type(exc).__name__}") from exc

        text = ""
        if resp.choices:
            text = (resp.choices[0].message.content or "").strip()
        if not text:
            raise AnalysisError("No response from AI")

        try:
            return AnalysisResult.model_validate(json.loads(text))
        except (ValueError, ValidationError) as exc:
            logger.warning("Malformed analysis response: %.200s", text)
            raise AnalysisError("Malformed response from AI") from exc
