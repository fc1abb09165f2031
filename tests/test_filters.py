import time
from datetime import datetime, timedelta, timezone

import pytest

from tech_digest import filters
from tech_digest.fetchers import candidates_from_feed
from tech_digest.filters import admit_entry, entry_timestamp, parse_datetime
from tech_digest.models import FeedResult
from tech_digest.summarizer import build_prompt

from tests.helpers import NOW, hours_ago

CUTOFF = NOW - timedelta(hours=72)


def _entry(**fields):
    base = {"title": "React 20 released", "link": "https://react.example/blog/20"}
    base.update(fields)
    return base


def test_recent_entry_admitted():
    admitted, published = admit_entry(_entry(published="Mon, 19 Oct 2026 08:00:00 GMT"), CUTOFF)
    assert admitted
    assert published == datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


def test_stale_entry_rejected():
    stale = hours_ago(73).strftime("%a, %d %b %Y %H:%M:%S GMT")
    admitted, published = admit_entry(_entry(published=stale), CUTOFF)
    assert not admitted
    assert published < CUTOFF


def test_entry_exactly_at_cutoff_admitted():
    admitted, published = admit_entry(_entry(published=CUTOFF.isoformat()), CUTOFF)
    assert admitted
    assert published == CUTOFF


def test_undated_entry_is_admitted():
    admitted, published = admit_entry(_entry(), CUTOFF)
    assert admitted
    assert published is None


def test_unparseable_date_is_treated_as_undated():
    admitted, published = admit_entry(_entry(published="sometime last week-ish"), CUTOFF)
    assert admitted
    assert published is None


def test_undated_policy_is_switchable(monkeypatch):
    monkeypatch.setattr(filters, "ADMIT_UNDATED_ENTRIES", False)
    admitted, _ = admit_entry(_entry(), CUTOFF)
    assert not admitted


@pytest.mark.parametrize(
    "fields",
    [
        {"title": "   "},
        {"link": ""},
        {"title": None},
        {"link": "\n\t"},
    ],
)
def test_missing_title_or_link_rejected_regardless_of_date(fields):
    entry = _entry(published=NOW.isoformat(), **fields)
    admitted, _ = admit_entry(entry, CUTOFF)
    assert not admitted


def test_normalized_field_takes_priority_over_raw_text():
    entry = {
        "published_parsed": time.gmtime(NOW.timestamp()),
        "published": "Thu, 01 Jan 2015 00:00:00 GMT",
    }
    assert entry_timestamp(entry) == NOW


def test_falls_back_to_later_fields_in_order():
    entry = {
        "published": "unknown",
        "updated": "2026-10-18T10:00:00+02:00",
        "created": "2020-01-01T00:00:00Z",
    }
    assert entry_timestamp(entry) == datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


def test_updated_struct_used_when_no_publish_fields():
    entry = {"updated_parsed": time.gmtime(hours_ago(5).timestamp())}
    assert entry_timestamp(entry) == hours_ago(5)


def test_no_fields_yields_none():
    assert entry_timestamp({"title": "x"}) is None


def test_naive_dates_are_taken_as_utc():
    assert parse_datetime("2026-10-19 09:30") == datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, "", "   ", 12345, "garbage"])
def test_parse_datetime_rejects_unusable_values(value):
    assert parse_datetime(value) is None


def test_out_of_range_instant_is_treated_as_undated():
    entry = _entry(published="9999-12-31T23:00:00-05:00")

    assert parse_datetime(entry["published"]) is None
    admitted, published = admit_entry(entry, CUTOFF)
    assert admitted
    assert published is None


def test_out_of_range_entry_still_serializes_into_prompt():
    result = FeedResult(
        url="https://a.example/feed",
        entries=[{"title": "t", "link": "https://x.example/1", "published": "9999-12-31T23:00:00-05:00"}],
    )

    candidates = candidates_from_feed(result, CUTOFF, 10)

    assert '"publishedAt": null' in build_prompt(candidates, 72)


@pytest.mark.parametrize("value", ["Mon", "Oct 19", "19 Oct", "10:30"])
def test_incomplete_dates_are_not_dates(value):
    assert parse_datetime(value) is None
    admitted, published = admit_entry(_entry(published=value), CUTOFF)
    assert admitted
    assert published is None
