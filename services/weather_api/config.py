"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # App
    app_name: str = "weather-api"
    app_version: str = "0.1.0"
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")

    # CORS: the browser UI may be served from anywhere
    cors_origins: list[str] = Field(default=["*"])

    # Sentry
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)

    # Weather (OpenWeatherMap)
    openweathermap_api_key: str = ""
    openweathermap_base_url: str = "https://api.openweathermap.org/data/2.5"
    weather_api_timeout_s: float = Field(default=5.0, gt=0.0)

    # Weather cache, one store per data type
    weather_cache_ttl_s: float = Field(default=600.0, gt=0.0)  # 10 minutes
    weather_cache_max_entries: int = Field(default=100, ge=1)
    # Share one upstream fetch between concurrent misses for the same key
    weather_collapse_inflight: bool = False

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
