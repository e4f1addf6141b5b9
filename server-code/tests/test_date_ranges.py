from datetime import date

import pytest

from indexing_insights.core.date_ranges import iso_boundary, resolve_relative_dates

THURSDAY = date(2025, 7, 17)


def spans(question, today=THURSDAY):
    return {r.phrase: (r.start, r.end) for r in resolve_relative_dates(question, today)}


def test_iso_boundary_format():
    assert iso_boundary(date(2025, 1, 2)) == "2025-01-02T00:00:00.000Z"


@pytest.mark.parametrize(
    "phrase,start,end",
    [
        ("today", "2025-07-17", "2025-07-18"),
        ("yesterday", "2025-07-16", "2025-07-17"),
        ("this week", "2025-07-14", "2025-07-21"),
        ("last week", "2025-07-07", "2025-07-14"),
        ("this month", "2025-07-01", "2025-08-01"),
        ("last month", "2025-06-01", "2025-07-01"),
        ("this year", "2025-01-01", "2026-01-01"),
        ("last year", "2024-01-01", "2025-01-01"),
    ],
)
def test_named_phrases(phrase, start, end):
    assert spans(f"failed jobs {phrase}")[phrase] == (f"{start}T00:00:00.000Z", f"{end}T00:00:00.000Z")


def test_month_and_year_rollover():
    assert spans("last month", date(2025, 1, 10))["last month"] == ("2024-12-01T00:00:00.000Z", "2025-01-01T00:00:00.000Z")
    assert spans("this month", date(2025, 12, 31))["this month"] == ("2025-12-01T00:00:00.000Z", "2026-01-01T00:00:00.000Z")


def test_last_n_days_includes_today():
    assert spans("jobs in the last 7 days")["last 7 days"] == ("2025-07-11T00:00:00.000Z", "2025-07-18T00:00:00.000Z")
    assert spans("Past 1 day")["past 1 day"] == ("2025-07-17T00:00:00.000Z", "2025-07-18T00:00:00.000Z")


def test_zero_days_is_ignored():
    assert resolve_relative_dates("last 0 days", THURSDAY) == []


def test_case_insensitive_and_multiple_phrases():
    assert set(spans("Compare LAST WEEK with This Week")) == {"last week", "this week"}


def test_no_phrase():
    assert resolve_relative_dates("Top clients by jobs", THURSDAY) == []
    assert resolve_relative_dates("", THURSDAY) == []


def test_as_filter_text():
    (r,) = resolve_relative_dates("yesterday", THURSDAY)

    assert r.as_filter_text() == '"yesterday" => timestamp >= "2025-07-16T00:00:00.000Z" AND timestamp < "2025-07-17T00:00:00.000Z"'
