"""Shared fakes and feed builders for the test suite."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import requests

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", payload: Any = None) -> None:
        self.status_code = status_code
        self.content = content
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON payload")
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Stands in for requests.Session; routes by URL and records calls."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None) -> None:
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.closed = False

    def _respond(self, method: str, url: str, kwargs: Dict[str, Any]) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        target = self.routes.get(url)
        if target is None:
            raise requests.ConnectionError(f"No route to {url}")
        if isinstance(target, Exception):
            raise target
        return target

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._respond("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._respond("POST", url, kwargs)

    def urls(self, method: str) -> List[str]:
        return [url for m, url, _ in self.calls if m == method]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def rss_item(title: str, link: str, published: Optional[datetime] = None, raw_date: Optional[str] = None) -> str:
    parts = [f"<title>{escape(title)}</title>", f"<link>{escape(link)}</link>"]
    if published is not None:
        parts.append(f"<pubDate>{format_datetime(published)}</pubDate>")
    elif raw_date is not None:
        parts.append(f"<pubDate>{escape(raw_date)}</pubDate>")
    return "<item>" + "".join(parts) + "</item>"


def rss_document(title: Optional[str], items: Sequence[str]) -> bytes:
    channel_title = f"<title>{escape(title)}</title>" if title else ""
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"{channel_title}<link>https://example.com/</link><description>test</description>"
        + "".join(items)
        + "</channel></rss>"
    )
    return body.encode("utf-8")


def feed_response(title: Optional[str], items: Sequence[str]) -> FakeResponse:
    return FakeResponse(content=rss_document(title, items))


def openai_response(*texts: str) -> FakeResponse:
    payload = {
        "output": [
            {"type": "message", "content": [{"type": "output_text", "text": text} for text in texts]}
        ]
    }
    return FakeResponse(content=json.dumps(payload).encode("utf-8"), payload=payload)


def hours_ago(hours: float) -> datetime:
    return NOW - timedelta(hours=hours)
