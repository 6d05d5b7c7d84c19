"""Configuration for the news sync service."""

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, Mapping, TypeVar

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_REQUEST_DELAY_MS = 1000
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_DATABASE_URL = "sqlite:///news.db"

DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m|h|d)?$", re.IGNORECASE)

UNIT_MULTIPLIERS_MS = {
    "ms": 1,
    "s": 1000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
}


@dataclass
class Config:
    feed_urls: list[str] = field(default_factory=list)
    cache_ttl_ms: float = DEFAULT_CACHE_TTL_MS
    request_delay_ms: float = DEFAULT_REQUEST_DELAY_MS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    fetch_interval: str | None = None
    timezone: str | None = None
    database_url: str = DEFAULT_DATABASE_URL
    sync_enabled: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 8000


def parse_duration_to_ms(value: str | None) -> float | None:
    """Parse a duration like ``300000``, ``30s`` or ``5m`` into milliseconds.

    A bare number is read as milliseconds. Returns None when the value is
    missing or unparseable.
    """
    if value is None:
        return None

    match = DURATION_PATTERN.match(str(value).strip())
    if not match:
        return None

    amount = float(match.group(1))
    unit = (match.group(2) or "ms").lower()
    return amount * UNIT_MULTIPLIERS_MS[unit]


def parse_feed_urls(value: str | list[str] | None) -> list[str]:
    """Split a newline/comma separated feed list, dropping blanks."""
    if not value:
        return []
    if isinstance(value, str):
        parts = re.split(r"[\n,]", value)
    else:
        parts = value
    return [part.strip() for part in parts if part and part.strip()]


def resolve_delay_ms(value: str | float | None) -> float:
    """Parse the inter-feed delay; negative or invalid values use the default."""
    if value is None or value == "":
        return DEFAULT_REQUEST_DELAY_MS
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = None
    if parsed is None or not math.isfinite(parsed) or parsed < 0:
        logger.warning(
            "Invalid NEWS_RSS_REQUEST_DELAY_MS %r, using %dms", value, DEFAULT_REQUEST_DELAY_MS
        )
        return DEFAULT_REQUEST_DELAY_MS
    return parsed


def _parse_bool(value: str | bool | None) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _read_settings(path: str | Path | None, environ: Mapping[str, str]) -> dict[str, str]:
    """Merge YAML file values (lower-case keys) under environment variables."""
    settings: dict[str, str] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        for key, value in load_yaml(config_path).items():
            settings[str(key).upper()] = value
    for key, value in environ.items():
        if value is not None and value != "":
            settings[key] = value
    return settings


def load_config(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from an optional YAML file and the environment.

    Environment variables win over file values. Invalid values degrade to
    defaults with a warning rather than failing startup.
    """
    settings = _read_settings(path, os.environ if environ is None else environ)

    cache_ttl_ms = parse_duration_to_ms(settings.get("NEWS_RSS_CACHE_TTL"))
    if cache_ttl_ms is None:
        if settings.get("NEWS_RSS_CACHE_TTL"):
            logger.warning(
                "Invalid NEWS_RSS_CACHE_TTL %r, using %dms",
                settings.get("NEWS_RSS_CACHE_TTL"),
                DEFAULT_CACHE_TTL_MS,
            )
        cache_ttl_ms = DEFAULT_CACHE_TTL_MS

    try:
        request_timeout = float(settings.get("NEWS_RSS_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
    except (TypeError, ValueError):
        logger.warning("Invalid NEWS_RSS_REQUEST_TIMEOUT, using %ds", DEFAULT_REQUEST_TIMEOUT)
        request_timeout = DEFAULT_REQUEST_TIMEOUT

    try:
        api_port = int(settings.get("NEWS_API_PORT", 8000))
    except (TypeError, ValueError):
        logger.warning("Invalid NEWS_API_PORT, using 8000")
        api_port = 8000

    interval = settings.get("NEWS_FETCH_INTERVAL")

    return Config(
        feed_urls=parse_feed_urls(settings.get("NEWS_RSS_FEEDS")),
        cache_ttl_ms=cache_ttl_ms,
        request_delay_ms=resolve_delay_ms(settings.get("NEWS_RSS_REQUEST_DELAY_MS")),
        request_timeout=request_timeout,
        fetch_interval=str(interval) if interval is not None else None,
        timezone=settings.get("CRON_TIMEZONE") or settings.get("TZ") or None,
        database_url=settings.get("DATABASE_URL", DEFAULT_DATABASE_URL),
        sync_enabled=(
            _parse_bool(settings.get("NEWS_SYNC_ENABLED"))
            or str(settings.get("APP_ENV", "")).lower() == "production"
        ),
        api_host=settings.get("NEWS_API_HOST", "0.0.0.0"),
        api_port=api_port,
    )


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[Config] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
