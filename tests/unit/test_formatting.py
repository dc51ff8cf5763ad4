"""Unit tests for display formatting helpers."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from pipewatch.query import bucket_label, format_duration, format_timestamp


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (45, "45s"),
        (59, "59s"),
        (60, "1m"),
        (185, "3m 5s"),
        (1200, "20m"),
        (3600, "1h"),
        (3900, "1h 5m"),
        (3959, "1h 5m"),
    ],
)
def test_format_duration(seconds: int, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_format_timestamp_uses_24_hour_clock() -> None:
    ts = datetime(2026, 3, 4, 17, 5, 9, tzinfo=UTC)
    assert format_timestamp(ts) == "Mar 04, 17:05:09"


def test_bucket_label_is_hours_and_minutes() -> None:
    ts = datetime(2026, 3, 4, 7, 5, 59, tzinfo=UTC)
    assert bucket_label(ts) == "07:05"
