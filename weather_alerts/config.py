"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "WeatherAlerts"
    debug: bool = False
    port: int = 3000
    cors_origins: list[str] = ["http://localhost:3001", "http://localhost:3000"]

    # Database (postgresql+psycopg for psycopg3; sqlite is accepted for tests/local runs)
    database_url: str = "postgresql+psycopg://localhost:5432/weather_alerts"
    db_connect_timeout: int = 10  # seconds

    # Weather provider (Tomorrow.io realtime API)
    tomorrow_api_key: Optional[str] = None
    weather_api_base_url: str = "https://api.tomorrow.io/v4/weather"
    weather_timeout: float = 5.0  # seconds per fetch

    # Evaluation scheduler
    evaluation_interval_seconds: int = 300
    evaluation_initial_delay_seconds: float = 10.0
    scheduler_enabled: bool = True

    # Alerts
    max_alerts: int = 3

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.port = int(os.getenv("PORT", str(self.port)))

        _origins = os.getenv("CORS_ORIGINS")
        if _origins is None:
            self.cors_origins = list(type(self).cors_origins)
        else:
            self.cors_origins = [o.strip() for o in _origins.split(",") if o.strip()]

        default_url = (
            f"postgresql+psycopg://{os.getenv('DB_USER', 'postgres')}:"
            f"{os.getenv('DB_PASSWORD', '')}@"
            f"{os.getenv('DB_HOST', 'localhost')}:"
            f"{os.getenv('DB_PORT', '5432')}/"
            f"{os.getenv('DB_NAME', 'weather_alerts')}"
        )
        raw_url = os.getenv("DATABASE_URL") or default_url
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        _key = os.getenv("TOMORROW_API_KEY", "").strip()
        self.tomorrow_api_key = _key or None
        self.weather_api_base_url = os.getenv(
            "WEATHER_API_BASE_URL", self.weather_api_base_url
        ).rstrip("/")
        self.weather_timeout = float(os.getenv("WEATHER_TIMEOUT", str(self.weather_timeout)))

        self.evaluation_interval_seconds = int(
            os.getenv("EVALUATION_INTERVAL_SECONDS", str(self.evaluation_interval_seconds))
        )
        self.evaluation_initial_delay_seconds = float(
            os.getenv(
                "EVALUATION_INITIAL_DELAY_SECONDS",
                str(self.evaluation_initial_delay_seconds),
            )
        )
        self.scheduler_enabled = _env_bool("SCHEDULER_ENABLED", self.scheduler_enabled)

        self.max_alerts = int(os.getenv("MAX_ALERTS", str(self.max_alerts)))
