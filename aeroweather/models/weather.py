from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Union

# aviationweather.gov fields are loosely typed: times may be epoch numbers or
# strings, visibility may be meters or "10SM"/"6+", wind direction may be "VRB".
TimeValue = Union[int, float, str]


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class CloudLayer(_UpstreamModel):
    cover: str = Field(..., description="Cover code, e.g. FEW/BKN/OVC")
    base: Optional[int] = Field(None, description="Cloud base, ft AGL")
    type: Optional[str] = Field(None, description="Cloud type tag, e.g. CB/TCU")

    @field_validator("cover", mode="before")
    @classmethod
    def _upper_cover(cls, v):
        return str(v or "").strip().upper()


class WeatherObservation(_UpstreamModel):
    """A METAR record as returned by aviationweather.gov (format=json)."""

    station_id: str = Field(..., validation_alias=AliasChoices("icaoId", "station_id", "stationId"))
    obs_time: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("obsTime", "obs_time"))
    report_time: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("reportTime", "report_time"))
    temp: Optional[float] = None
    dewp: Optional[float] = None
    wdir: Optional[Union[int, float, str]] = Field(None, description="Degrees or 'VRB'")
    wspd: Optional[float] = Field(None, description="kt")
    wgst: Optional[float] = Field(None, description="kt")
    visib: Optional[Union[int, float, str]] = None
    altim: Optional[float] = Field(None, description="hPa")
    raw_ob: str = Field("", validation_alias=AliasChoices("rawOb", "raw_ob"))
    clouds: List[CloudLayer] = Field(default_factory=list)

    @field_validator("station_id", mode="before")
    @classmethod
    def _upper_station(cls, v):
        return str(v or "").strip().upper()

    @field_validator("clouds", mode="before")
    @classmethod
    def _null_clouds(cls, v):
        return v or []


class ForecastPeriod(_UpstreamModel):
    time_from: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("timeFrom", "fcst_time_from", "time_from"))
    time_to: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("timeTo", "fcst_time_to", "time_to"))
    change_indicator: Optional[str] = Field(None, validation_alias=AliasChoices("fcstChange", "change_indicator"))
    visib: Optional[Union[int, float, str]] = None
    wx_string: Optional[str] = Field(None, validation_alias=AliasChoices("wxString", "wx_string"))
    clouds: List[CloudLayer] = Field(default_factory=list)

    @field_validator("clouds", mode="before")
    @classmethod
    def _null_clouds(cls, v):
        return v or []


class ForecastReport(_UpstreamModel):
    """A TAF record as returned by aviationweather.gov (format=json)."""

    station_id: str = Field(..., validation_alias=AliasChoices("icaoId", "station_id", "stationId"))
    issue_time: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("issueTime", "issue_time"))
    valid_time_from: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("validTimeFrom", "valid_time_from"))
    valid_time_to: Optional[TimeValue] = Field(None, validation_alias=AliasChoices("validTimeTo", "valid_time_to"))
    raw_taf: str = Field("", validation_alias=AliasChoices("rawTAF", "raw_taf"))
    periods: List[ForecastPeriod] = Field(default_factory=list, validation_alias=AliasChoices("fcsts", "forecast", "periods"))

    @field_validator("station_id", mode="before")
    @classmethod
    def _upper_station(cls, v):
        return str(v or "").strip().upper()

    @field_validator("periods", mode="before")
    @classmethod
    def _null_periods(cls, v):
        return v or []


class StationInfo(_UpstreamModel):
    station_id: str = Field(..., validation_alias=AliasChoices("icaoId", "station_id"))
    name: str = Field("", validation_alias=AliasChoices("name", "site"))
    lat: Optional[float] = None
    lon: Optional[float] = None
    elev: Optional[float] = None
    country: Optional[str] = None
