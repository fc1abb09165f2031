"""Lookback-window filtering for parsed feed entries."""

from __future__ import annotations

import calendar
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from dateutil import parser as date_parser

LOGGER = logging.getLogger(__name__)

# Entries whose dates cannot be read are kept rather than dropped: feeds with
# non-standard date formats would otherwise vanish from the digest entirely.
ADMIT_UNDATED_ENTRIES = True

DateExtractor = Callable[[Mapping[str, Any]], Optional[datetime]]

# Two defaults differing in year, month and day expose incomplete date strings.
_INCOMPLETE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parsed_field(key: str) -> DateExtractor:
    """Read one of feedparser's normalized ``*_parsed`` struct_time fields."""

    def extract(entry: Mapping[str, Any]) -> Optional[datetime]:
        value = entry.get(key)
        if not isinstance(value, time.struct_time):
            return None
        try:
            return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            return None

    return extract


def _text_field(key: str) -> DateExtractor:
    """Parse a raw date string as published by the feed."""

    def extract(entry: Mapping[str, Any]) -> Optional[datetime]:
        return parse_datetime(entry.get(key))

    return extract


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a complete date string into an aware UTC datetime, or None.

    Strings missing a year, month or day (e.g. a bare weekday) are not
    dates; dateutil would otherwise fill the gaps from its default.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        first = date_parser.parse(value, default=_INCOMPLETE_DEFAULTS[0])
        second = date_parser.parse(value, default=_INCOMPLETE_DEFAULTS[1])
        if first.date() != second.date():
            return None
        if first.tzinfo is None:
            first = first.replace(tzinfo=timezone.utc)
        return first.astimezone(timezone.utc)
    except (ValueError, TypeError, OverflowError):
        return None


# Priority order: first extractor that yields a valid instant wins.
DATE_EXTRACTORS: Tuple[DateExtractor, ...] = (
    _parsed_field("published_parsed"),
    _text_field("published"),
    _parsed_field("updated_parsed"),
    _text_field("updated"),
    _text_field("created"),
)


def entry_timestamp(
    entry: Mapping[str, Any], extractors: Sequence[DateExtractor] = DATE_EXTRACTORS
) -> Optional[datetime]:
    """Return the best-effort publish time of an entry, or None."""

    for extract in extractors:
        published = extract(entry)
        if published is not None:
            return published
    return None


def entry_text(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    return value.strip() if isinstance(value, str) else ""


def admit_entry(entry: Mapping[str, Any], cutoff: datetime) -> Tuple[bool, Optional[datetime]]:
    """Decide whether an entry belongs in the candidate set.

    Returns ``(admitted, published_at)``. Entries without a title or link are
    always rejected; entries dated strictly before ``cutoff`` are rejected;
    undated entries follow ``ADMIT_UNDATED_ENTRIES``.
    """

    if not entry_text(entry, "title") or not entry_text(entry, "link"):
        LOGGER.debug("Rejecting entry without title or link: %r", entry.get("link"))
        return False, None

    published = entry_timestamp(entry)
    if published is None:
        return ADMIT_UNDATED_ENTRIES, None
    if published < cutoff:
        LOGGER.debug("Rejecting stale entry %s (%s)", entry_text(entry, "link"), published.isoformat())
        return False, published
    return True, published
