"""Shared dataclasses and type definitions for the digest."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def isoformat_utc(value: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class Candidate:
    """Normalized feed entry handed to the summarization service."""

    source: str
    title: str
    url: str
    published_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        published = isoformat_utc(self.published_at) if self.published_at else None
        return {
            "source": self.source,
            "title": self.title,
            "url": self.url,
            "publishedAt": published,
        }


@dataclass
class FeedResult:
    """Outcome of reading a single feed: its entries, or why there are none."""

    url: str
    title: Optional[str] = None
    entries: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def source_name(self) -> str:
        return self.title or self.url


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of posting the digest to the chat webhook."""

    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
