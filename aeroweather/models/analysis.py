from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Optional

from aeroweather.models.weather import ForecastReport, WeatherObservation


class AnalyzeRequest(BaseModel):
    observation: Optional[WeatherObservation] = Field(
        None, validation_alias=AliasChoices("observation", "metar"), description="METAR record"
    )
    forecast: Optional[ForecastReport] = Field(
        None, validation_alias=AliasChoices("forecast", "taf"), description="TAF record"
    )


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str = Field(..., description="One-sentence summary of current weather")
    conditions_rating: str = Field(..., description="Good / Difficult / Dangerous / No-fly")
    hazards: List[str] = Field(default_factory=list)
    forecast_summary: str = Field(..., description="Short narrative for the next hours")
    airport_name: str = Field(..., validation_alias=AliasChoices("airport_name", "airport_name_ru"))
    local_time: str = Field(..., description="Local observation time, 'DD.MM HH:MM'")


# JSON schema handed to the model; all six fields required.
ANALYSIS_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "conditions_rating": {"type": "string"},
        "hazards": {"type": "array", "items": {"type": "string"}},
        "forecast_summary": {"type": "string"},
        "airport_name": {"type": "string"},
        "local_time": {"type": "string"},
    },
    "required": ["summary", "conditions_rating", "hazards", "forecast_summary", "airport_name", "local_time"],
    "additionalProperties": False,
}
