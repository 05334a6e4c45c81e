from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from aeroweather.models.analysis import AnalysisResult
from aeroweather.models.weather import StationInfo
from aeroweather.utils.units import VisibilityTier


class InstantView(BaseModel):
    utc: str
    relative: str = ""


class WindView(BaseModel):
    direction: str
    speed_ms: Optional[str] = None
    gust_ms: Optional[str] = None


class VisibilityView(BaseModel):
    value: str
    tier: VisibilityTier
    color_hint: str


class CloudView(BaseModel):
    cover: str
    description: str
    base_m: Optional[int] = None
    type: Optional[str] = None


class ObservationView(BaseModel):
    raw: str
    observed: InstantView
    temperature: Optional[float] = None
    dewpoint: Optional[float] = None
    wind: WindView
    visibility: VisibilityView
    altimeter: Optional[float] = None
    clouds: List[CloudView] = Field(default_factory=list)
    clouds_summary: str


class ForecastPeriodView(BaseModel):
    valid_from: InstantView
    valid_to: InstantView
    change_indicator: Optional[str] = None
    visibility: Optional[VisibilityView] = None
    weather: Optional[str] = None
    clouds_summary: str


class ForecastView(BaseModel):
    raw: str
    issued: InstantView
    valid_from: InstantView
    valid_to: InstantView
    periods: List[ForecastPeriodView] = Field(default_factory=list)


class TimeView(BaseModel):
    date: str
    time: str
    sub_label: str
    is_local: bool
    utc_label: str


class AnalysisView(BaseModel):
    status: Literal["ready", "omitted", "skipped"]
    result: Optional[AnalysisResult] = None
    retry_url: Optional[str] = None


class WeatherReport(BaseModel):
    station_id: str
    display_name: str
    station: Optional[StationInfo] = None
    observation: Optional[ObservationView] = None
    forecast: Optional[ForecastView] = None
    time: TimeView
    analysis: AnalysisView
