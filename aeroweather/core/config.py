from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = Field(default="AeroWeather")
    log_level: str = Field(default="INFO")
    display_language: Literal["en", "ru"] = Field(default="en")

    # Access gate (unset = open)
    access_key: Optional[str] = None

    # aviationweather.gov
    aviationweather_base_url: str = Field(default="https://aviationweather.gov/api/data")
    http_timeout_seconds: float = Field(default=12.0)
    user_agent: str = Field(default="Mozilla/5.0 (compatible; AeroWeather/1.0)")

    # OpenAI (server-side only)
    openai_api_key: Optional[str] = None
    openai_model: str = Field(default="gpt-4o-mini")
    openai_timeout_seconds: float = Field(default=20.0)
    openai_max_tokens: int = Field(default=600)
    # whole analysis phase of /api/report, cache lookups included
    analysis_timeout_seconds: float = Field(default=25.0)

    # Analysis cache; no redis_host and no in-memory flag = caching disabled
    redis_host: Optional[str] = None
    redis_port: int = Field(default=6379)
    redis_password: Optional[str] = None
    redis_db: int = Field(default=0)
    analysis_cache_in_memory: bool = Field(default=False)
    analysis_cache_ttl_seconds: int = Field(default=900)

    # Rate limiting (per instance, analyze endpoint only)
    rate_limit_per_minute: int = Field(default=30)

settings = Settings()
