# indexing_insights/core/date_ranges.py
"""
Resolve relative date phrases ("last month", "this week", "today", ...) into
literal ISO-8601 boundaries so the model never has to compute dates itself.

Ranges are half-open: ``timestamp >= start AND timestamp < end``.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import re
from typing import List, Optional, Tuple

LAST_N_DAYS_RE = re.compile(r"\b(?:last|past)\s+(\d{1,3})\s+days?\b", re.I)


@dataclass(frozen=True)
class DateRange:
    phrase: str
    start: str
    end: str

    def as_filter_text(self) -> str:
        return f'"{self.phrase}" => timestamp >= "{self.start}" AND timestamp < "{self.end}"'


def iso_boundary(d: date) -> str:
    """Midnight UTC of ``d`` as ``YYYY-MM-DDTHH:mm:ss.sssZ``."""
    dt = datetime.combine(d, time.min, tzinfo=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _month_start(d: date) -> date:
    return d.replace(day=1)


def _next_month_start(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def _span(phrase: str, today: date) -> Optional[Tuple[date, date]]:
    if phrase == "today":
        return today, today + timedelta(days=1)
    if phrase == "yesterday":
        return today - timedelta(days=1), today
    if phrase == "this week":
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=7)
    if phrase == "last week":
        start = today - timedelta(days=today.weekday() + 7)
        return start, start + timedelta(days=7)
    if phrase == "this month":
        return _month_start(today), _next_month_start(today)
    if phrase == "last month":
        end = _month_start(today)
        return _month_start(end - timedelta(days=1)), end
    if phrase == "this year":
        return date(today.year, 1, 1), date(today.year + 1, 1, 1)
    if phrase == "last year":
        return date(today.year - 1, 1, 1), date(today.year, 1, 1)
    return None


# Longer phrases first so "last week" is not also read as "week".
PHRASES: Tuple[str, ...] = (
    "yesterday", "today",
    "last week", "this week",
    "last month", "this month",
    "last year", "this year",
)


def resolve_relative_dates(question: str, today: date) -> List[DateRange]:
    lower = (question or "").lower()
    out: List[DateRange] = []
    for phrase in PHRASES:
        if re.search(rf"\b{re.escape(phrase)}\b", lower):
            start, end = _span(phrase, today)  # type: ignore[misc]
            out.append(DateRange(phrase, iso_boundary(start), iso_boundary(end)))
    for m in LAST_N_DAYS_RE.finditer(question or ""):
        n = int(m.group(1))
        if n <= 0:
            continue
        # Includes today: "last 7 days" on the 10th covers the 4th..10th.
        start = today - timedelta(days=n - 1)
        out.append(DateRange(m.group(0).lower(), iso_boundary(start), iso_boundary(today + timedelta(days=1))))
    return out
