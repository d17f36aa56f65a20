"""Environment-driven settings for the collection workflow.

The CLI loads this once at startup and passes it into the gateway client,
initiator and poller. Values come from environment variables or a `.env`
file (see `.env.example`).
"""

from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from momocollect.common.errors import ConfigurationError


DEMO_BASE_URL = "https://demo.campay.net"


class Settings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "momocollect"
    log_level: str = "INFO"
    api_key: str
    base_url: str = DEMO_BASE_URL
    currency: str = "XAF"
    request_timeout_seconds: float = 30.0
    poll_max_attempts: int = 12
    poll_interval_seconds: float = 5.0
    metrics_port: int | None = None
    otel_exporter_otlp_endpoint: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


def load_settings(**overrides) -> Settings:
    """Build settings once, turning a missing or malformed value into a typed error."""

    try:
        settings = Settings(**overrides)
    except SettingsValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise ConfigurationError(f"invalid or missing configuration: {fields}") from exc
    if not settings.api_key.strip():
        raise ConfigurationError("API_KEY is empty. Set it in the environment or .env file")
    return settings
