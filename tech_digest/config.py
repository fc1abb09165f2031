"""Configuration utilities for the tech news digest project."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_LOOKBACK_HOURS = 72.0
DEFAULT_MAX_ITEMS_PER_FEED = 15
DEFAULT_OPENAI_API_URL = "https://api.openai.com/v1/responses"
DEFAULT_REQUEST_TIMEOUT = 60.0
LOCAL_ENV_FILE = Path(".env.local")


class ConfigError(ValueError):
    """Raised when the runtime configuration is missing or invalid."""


@dataclass(frozen=True)
class Config:
    """Runtime configuration values for the digest run."""

    openai_api_key: str
    slack_webhook_url: Optional[str]
    feeds: Tuple[str, ...]
    model: str = DEFAULT_MODEL
    lookback_hours: float = DEFAULT_LOOKBACK_HOURS
    max_items_per_feed: int = DEFAULT_MAX_ITEMS_PER_FEED
    openai_api_url: str = DEFAULT_OPENAI_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def cutoff(self, now: datetime) -> datetime:
        """Return the oldest publish time still inside the lookback window."""
        return now - timedelta(hours=self.lookback_hours)


def parse_feeds(raw: str) -> Tuple[str, ...]:
    """Split a newline-separated feed list, dropping blank lines."""

    return tuple(line.strip() for line in raw.splitlines() if line.strip())


def load_local_env(path: Path = LOCAL_ENV_FILE) -> bool:
    """Load ``.env.local`` for local runs; CI provides its own environment."""

    if os.getenv("GITHUB_ACTIONS"):
        return False
    if not path.exists():
        return False
    load_dotenv(path, override=False)
    LOGGER.info("Loaded %s", path)
    return True


def _number(env: Mapping[str, str], name: str, default, cast, minimum):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be finite, got {raw!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}")
    return value


def load_config(environ: Optional[Mapping[str, str]] = None, require_webhook: bool = True) -> Config:
    """Load configuration from environment variables and defaults.

    Raises ConfigError before any network activity when a required value is
    missing, so a misconfigured run never ingests anything.
    """

    env = os.environ if environ is None else environ

    api_key = (env.get("OPENAI_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("Missing OPENAI_API_KEY")

    webhook = (env.get("SLACK_WEBHOOK_URL") or "").strip() or None
    if require_webhook and not webhook:
        raise ConfigError("Missing SLACK_WEBHOOK_URL")

    feeds = parse_feeds(env.get("FEEDS", ""))
    if not feeds:
        raise ConfigError("FEEDS is empty")

    lookback = _number(env, "HOURS_LOOKBACK", DEFAULT_LOOKBACK_HOURS, float, 0)
    if lookback <= 0:
        raise ConfigError("HOURS_LOOKBACK must be positive")

    timeout = _number(env, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float, 0)
    if timeout <= 0:
        raise ConfigError("REQUEST_TIMEOUT must be positive")

    return Config(
        openai_api_key=api_key,
        slack_webhook_url=webhook,
        feeds=feeds,
        model=(env.get("MODEL") or "").strip() or DEFAULT_MODEL,
        lookback_hours=lookback,
        max_items_per_feed=_number(env, "MAX_ITEMS_PER_FEED", DEFAULT_MAX_ITEMS_PER_FEED, int, 1),
        openai_api_url=(env.get("OPENAI_API_URL") or "").strip() or DEFAULT_OPENAI_API_URL,
        request_timeout=timeout,
    )
