"""Startup-time helpers for safe config logging."""

from momocollect.common.config import Settings
from momocollect.common.logging import logger


def _safe_value(name: str, value) -> str:
    """Return a printable value with simple redaction for secret-like setting names."""

    if value is None:
        return "<unset>"
    if any(secret in name.upper() for secret in ["KEY", "SECRET", "PASSWORD", "TOKEN"]):
        return "<redacted>"
    return str(value)


def log_startup_config(settings: Settings, keys: list[str]) -> None:
    """Log selected startup settings for quick troubleshooting."""

    config = {"service": settings.service_name}
    for key in keys:
        config[key] = _safe_value(key, getattr(settings, key, None))
    logger.info("startup_config=%s", config)
