from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "RoutePulse Demo API"
    debug: bool = False

    # Console reporter interval in milliseconds (PULSE_INTERVAL_MS)
    pulse_interval_ms: int = Field(default=5000, gt=0)
    # Mount point for the JSON API and dashboard, e.g. /pulse/api and /pulse/dashboard
    pulse_prefix: str = "/pulse"
    # Print live metrics to stdout while the app runs
    pulse_console_enabled: bool = True

    # slowapi limit applied to the demo routes; monitor routes are exempt
    rate_limit: str = "100/minute"


def get_settings() -> Settings:
    return Settings()
