from datetime import date

import pytest

from social_transport.errors import ValidationError
from social_transport.services.recurrence import (
    MAX_OCCURRENCES,
    add_months,
    expand_dates,
    normalize_time,
    parse_date,
)


def _iso(dates):
    return [d.isoformat() for d in dates]


def test_weekly_series_includes_end_date():
    dates = expand_dates(date(2024, 1, 1), "weekly", date(2024, 1, 22))
    assert _iso(dates) == ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22"]


def test_daily_series():
    dates = expand_dates(date(2024, 2, 27), "daily", date(2024, 3, 2))
    assert _iso(dates) == ["2024-02-27", "2024-02-28", "2024-02-29", "2024-03-01", "2024-03-02"]


def test_monthly_series_clamps_to_month_end_and_returns_to_anchor_day():
    dates = expand_dates(date(2024, 1, 31), "monthly", date(2024, 3, 31))
    assert _iso(dates) == ["2024-01-31", "2024-02-29", "2024-03-31"]


def test_monthly_series_in_non_leap_year():
    dates = expand_dates(date(2023, 1, 31), "monthly", date(2023, 5, 31))
    assert _iso(dates) == ["2023-01-31", "2023-02-28", "2023-03-31", "2023-04-30", "2023-05-31"]


def test_monthly_series_stops_before_end_when_next_date_passes_it():
    dates = expand_dates(date(2024, 1, 15), "monthly", date(2024, 3, 14))
    assert _iso(dates) == ["2024-01-15", "2024-02-15"]


def test_single_day_series():
    assert _iso(expand_dates(date(2024, 5, 5), "weekly", date(2024, 5, 5))) == ["2024-05-05"]


def test_add_months_rolls_over_year():
    assert add_months(date(2024, 12, 31), 2) == date(2025, 2, 28)
    assert add_months(date(2024, 11, 30), 1) == date(2024, 12, 30)


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        expand_dates(date(2024, 2, 1), "daily", date(2024, 1, 31))


def test_unknown_recurring_type_is_rejected():
    with pytest.raises(ValidationError):
        expand_dates(date(2024, 1, 1), "yearly", date(2025, 1, 1))


def test_series_is_capped():
    with pytest.raises(ValidationError):
        expand_dates(date(2020, 1, 1), "daily", date(2020, 1, 1).replace(year=2024))
    assert len(expand_dates(date(2024, 1, 1), "daily", date(2024, 1, 1).replace(year=2026))) < MAX_OCCURRENCES


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("9:30", "09:30"),
        ("09:30", "09:30"),
        ("0:00", "00:00"),
        ("23:59", "23:59"),
        (" 14:05 ", "14:05"),
    ],
)
def test_normalize_time_accepts_valid_times(raw, expected):
    assert normalize_time(raw) == expected


@pytest.mark.parametrize("raw", ["25:00", "24:00", "12:60", "9:5", "abc", "", "930", "09:30:00", None])
def test_normalize_time_rejects_malformed_times(raw):
    with pytest.raises(ValidationError) as exc:
        normalize_time(raw)
    assert exc.value.message == "invalid time format, expected HH:MM"


@pytest.mark.parametrize("raw", ["2024-02-30", "2024/01/01", "20240101", "", None, "2024-1-5"])
def test_parse_date_rejects_malformed_dates(raw):
    with pytest.raises(ValidationError):
        parse_date(raw)


def test_parse_date():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
