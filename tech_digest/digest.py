"""High-level orchestration for building and delivering the tech news digest."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import requests

from .config import Config, ConfigError, load_config
from .dedup import deduplicate
from .fetchers import collect_candidates
from .models import Candidate, DeliveryResult
from .notifier import post_to_slack
from .summarizer import request_digest

LOGGER = logging.getLogger(__name__)


@dataclass
class DigestResult:
    candidates: List[Candidate]
    text: str
    delivery: Optional[DeliveryResult] = None


def build_candidates(session: requests.Session, config: Config, now: datetime) -> List[Candidate]:
    cutoff = config.cutoff(now)
    LOGGER.info("Collecting entries published after %s from %d feeds", cutoff.isoformat(), len(config.feeds))
    candidates = collect_candidates(
        session,
        config.feeds,
        cutoff,
        config.max_items_per_feed,
        timeout=config.request_timeout,
    )
    unique = deduplicate(candidates)
    LOGGER.info("Keeping %d unique candidates (dropped %d duplicates)", len(unique), len(candidates) - len(unique))
    return unique


def _run(session: requests.Session, config: Config, now: datetime, dry_run: bool) -> DigestResult:
    candidates = build_candidates(session, config, now)
    text = request_digest(session, config, candidates)
    result = DigestResult(candidates=candidates, text=text)

    if dry_run:
        print(text)
        return result

    result.delivery = post_to_slack(session, config.slack_webhook_url, text, timeout=config.request_timeout)
    if result.delivery.ok:
        LOGGER.info("OK")
    else:
        LOGGER.error(
            "Slack delivery failed (status=%s): %s",
            result.delivery.status_code,
            result.delivery.error,
        )
    return result


def write_digest(text: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    LOGGER.info("Digest written to %s", path)


def run(
    config: Config | None = None,
    now: datetime | None = None,
    dry_run: bool = False,
    session: requests.Session | None = None,
) -> DigestResult:
    """Run the whole pipeline once.

    The HTTP session is always closed before returning, including when the
    summarization call raises.
    """

    config = config or load_config(require_webhook=not dry_run)
    if not dry_run and not config.slack_webhook_url:
        raise ConfigError("Missing SLACK_WEBHOOK_URL")
    now = now or datetime.now(timezone.utc)
    session = session or requests.Session()
    with session:
        return _run(session, config, now, dry_run)


__all__ = [
    "DigestResult",
    "build_candidates",
    "run",
    "write_digest",
]
