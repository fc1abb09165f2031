"""Feed reading and candidate aggregation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import feedparser
import requests

from .filters import admit_entry, entry_text
from .models import Candidate, FeedResult

LOGGER = logging.getLogger(__name__)

USER_AGENT = "tech-digest/0.1 (+feed reader)"


class FeedFetchError(Exception):
    """Raised when a feed cannot be fetched or parsed."""


def fetch_feed(session: requests.Session, url: str, timeout: Optional[float] = None) -> FeedResult:
    """Fetch and parse one feed, raising FeedFetchError on failure."""

    try:
        response = session.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FeedFetchError(str(exc)) from exc

    feed = feedparser.parse(response.content)
    entries = list(feed.get("entries") or [])
    if feed.get("bozo") and not entries:
        reason = feed.get("bozo_exception") or "malformed feed"
        raise FeedFetchError(f"Invalid RSS/Atom document ({reason})")
    if not feed.get("version") and not entries:
        raise FeedFetchError("Feed not recognized as RSS or Atom")
    if feed.get("bozo"):
        LOGGER.debug("Feed %s is malformed but usable: %s", url, feed.get("bozo_exception"))

    title = (feed.get("feed") or {}).get("title")
    title = title.strip() if isinstance(title, str) else ""
    return FeedResult(url=url, title=title or None, entries=entries)


def read_feed(session: requests.Session, url: str, timeout: Optional[float] = None) -> FeedResult:
    """Read one feed without ever letting its failure escape.

    A failing source is logged and reported as a FeedResult carrying the
    error and no entries, so the remaining feeds are still processed.
    """

    try:
        result = fetch_feed(session, url, timeout=timeout)
    except FeedFetchError as exc:
        LOGGER.warning("Failed to parse feed %s: %s", url, exc)
        return FeedResult(url=url, error=str(exc))
    except Exception as exc:  # pragma: no cover - guard clause
        LOGGER.exception("Feed %s failed unexpectedly: %s", url, exc)
        return FeedResult(url=url, error=str(exc))
    LOGGER.info("Fetched %d entries from %s", len(result.entries), result.source_name)
    return result


def candidates_from_feed(result: FeedResult, cutoff: datetime, max_items: int) -> List[Candidate]:
    """Cap a feed's entries, filter them, and convert survivors to candidates."""

    candidates: List[Candidate] = []
    for entry in result.entries[:max_items]:
        admitted, published_at = admit_entry(entry, cutoff)
        if not admitted:
            continue
        candidates.append(
            Candidate(
                source=result.source_name,
                title=entry_text(entry, "title"),
                url=entry_text(entry, "link"),
                published_at=published_at,
            )
        )
    return candidates


def collect_candidates(
    session: requests.Session,
    feeds: Iterable[str],
    cutoff: datetime,
    max_items: int,
    timeout: Optional[float] = None,
) -> List[Candidate]:
    """Collect candidates from all feeds, in feed order, without deduplication."""

    aggregated: List[Candidate] = []
    failed = 0
    for url in feeds:
        url = url.strip()
        if not url:
            continue
        result = read_feed(session, url, timeout=timeout)
        if not result.ok:
            failed += 1
            continue
        aggregated.extend(candidates_from_feed(result, cutoff, max_items))

    LOGGER.info("Collected %d candidates (%d feeds failed)", len(aggregated), failed)
    return aggregated
