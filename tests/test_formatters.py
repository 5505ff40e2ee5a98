"""Tests for date and time display helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from app.shared.utils.formatters import (
    format_date,
    format_full_datetime,
    format_time,
    relative_time_description,
)

NOW = datetime(2026, 3, 17, 12, 0, tzinfo=timezone.utc)


def test_fixed_patterns():
    moment = datetime(2026, 3, 7, 9, 5, 3)
    assert format_full_datetime(moment) == "07/03/2026 09:05:03"
    assert format_date(moment) == "07/03/2026"


@pytest.mark.parametrize(
    "hour, minute, expected",
    [(0, 0, "00:00"), (9, 5, "09:05"), (23, 59, "23:59")],
)
def test_format_time(hour, minute, expected):
    assert format_time(hour, minute) == expected


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(hours=3), "Today"),
        (timedelta(days=1), "Yesterday"),
        (timedelta(days=1, hours=23), "Yesterday"),
        (timedelta(days=4), "4 days ago"),
        (timedelta(days=15), "2 weeks ago"),
        (timedelta(days=65), "2 months ago"),
        (timedelta(days=800), "2 years ago"),
        (-timedelta(days=2), "Today"),
    ],
)
def test_relative_time_description(delta, expected):
    assert relative_time_description(NOW - delta, NOW) == expected


def test_relative_time_naive_treated_as_utc():
    naive = datetime(2026, 3, 16, 12, 0)
    assert relative_time_description(naive, NOW) == "Yesterday"
