"""Application configuration module.

Reads settings from environment variables with sane defaults so the service
can start with no configuration at all for a local event.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from core.constants import DatabaseDefaults, PromotionDefaults

load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


def _get_optional_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value or None


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    secret_key: str
    public_base_url: str
    database_path: str
    log_folder: str
    log_level: str
    db_pool_size: int
    db_busy_timeout: int
    log_retention: int
    recent_logs_limit: int
    locations_file: Optional[str]


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values
    """
    web_port = _get_int("WEB_PORT", 5000)
    config = Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=web_port,
        secret_key=_get_str("SECRET_KEY", "change_me_in_production"),
        public_base_url=_get_str("PUBLIC_BASE_URL", f"http://localhost:{web_port}"),
        database_path=_get_str("DATABASE_PATH", "data/promotion.sqlite"),
        log_folder=_get_str("LOG_FOLDER", "logs"),
        log_level=_get_str("LOG_LEVEL", "INFO").upper(),
        db_pool_size=_get_int("DB_POOL_SIZE", DatabaseDefaults.POOL_SIZE),
        db_busy_timeout=_get_int("DB_BUSY_TIMEOUT", DatabaseDefaults.BUSY_TIMEOUT),
        log_retention=_get_int("LOG_RETENTION", PromotionDefaults.LOG_RETENTION),
        recent_logs_limit=_get_int("RECENT_LOGS_LIMIT", PromotionDefaults.RECENT_LOGS_LIMIT),
        locations_file=_get_optional_str("LOCATIONS_FILE"),
    )

    return config
