"""
Date window resolution for dashboard filters.

All windows are closed intervals ``[start, end]`` of naive UTC datetimes, the
same convention ``time_utils.utcnow`` and the stored ``created_at`` columns use.
``end`` always falls on ``23:59:59.999`` of its day.

Two vocabularies exist and are kept apart:

- KPI / dues filters: today, last-week, last-month, last-6-months, last-year
- trend series filters: last-7-days, last-month, last-year
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import NamedTuple


ONE_MS = timedelta(milliseconds=1)

TOKEN_TODAY = "today"
TOKEN_LAST_WEEK = "last-week"
TOKEN_LAST_MONTH = "last-month"
TOKEN_LAST_6_MONTHS = "last-6-months"
TOKEN_LAST_YEAR = "last-year"

SERIES_LAST_7_DAYS = "last-7-days"
SERIES_LAST_MONTH = "last-month"
SERIES_LAST_YEAR = "last-year"

# token -> (unit, span); unit is "days" or "months"
_PERIODS = {
    TOKEN_TODAY: ("days", 1),
    TOKEN_LAST_WEEK: ("days", 7),
    TOKEN_LAST_MONTH: ("days", 30),
    TOKEN_LAST_6_MONTHS: ("months", 6),
    TOKEN_LAST_YEAR: ("months", 12),
}


class Window(NamedTuple):
    start: datetime
    end: datetime

    @property
    def stop(self) -> datetime:
        """Exclusive upper bound: midnight after ``end``. Sub-millisecond stamps past ``end`` still belong here."""
        return self.end + ONE_MS

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.stop


class Bucket(NamedTuple):
    label: str
    start: datetime
    end: datetime

    @property
    def window(self) -> Window:
        return Window(self.start, self.end)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def _month_start(moment: datetime, months_back: int = 0) -> datetime:
    index = moment.year * 12 + (moment.month - 1) - months_back
    year, month = divmod(index, 12)
    return datetime(year, month + 1, 1)


def _period_of(token: str | None) -> tuple[str, int]:
    return _PERIODS.get(token, _PERIODS[TOKEN_LAST_WEEK])


def _shift_back(start: datetime, unit: str, span: int) -> datetime:
    if unit == "days":
        return start - timedelta(days=span)
    return _month_start(start, span)


def resolve(token: str | None, now: datetime) -> Window:
    """
    Concrete window for a KPI filter token.

    Unknown tokens (and None) resolve as last-week.
    """
    unit, span = _period_of(token)
    end = end_of_day(now)
    if unit == "days":
        start = start_of_day(now - timedelta(days=span - 1))
    elif token == TOKEN_LAST_YEAR:
        start = _month_start(now, 12)
    else:
        start = _month_start(now, span - 1)
    return Window(start, end)


def resolve_previous(token: str | None, now: datetime) -> Window:
    """
    The contiguous window immediately before ``resolve(token, now)``.

    Its end is one millisecond before the current start; its start is the
    current start shifted back one full period (days or calendar months).
    """
    current = resolve(token, now)
    unit, span = _period_of(token)
    return Window(_shift_back(current.start, unit, span), current.start - ONE_MS)


def week_range(moment: datetime) -> Window:
    """ISO week (Monday 00:00 to Sunday 23:59:59.999) containing ``moment``."""
    monday = start_of_day(moment - timedelta(days=moment.weekday()))
    return Window(monday, end_of_day(monday + timedelta(days=6)))


def previous_week_range(moment: datetime) -> Window:
    current = week_range(moment)
    return week_range(current.start - ONE_MS)


# =============================================================================
# BUCKET GENERATORS (oldest first)
# =============================================================================

def day_buckets(now: datetime, n: int, label: str = "weekday") -> list[Bucket]:
    """Last ``n`` calendar days including today, labelled "Mon" or "YYYY-MM-DD"."""
    buckets = []
    for offset in range(n - 1, -1, -1):
        day = now - timedelta(days=offset)
        text = day.strftime("%a") if label == "weekday" else day.strftime("%Y-%m-%d")
        buckets.append(Bucket(text, start_of_day(day), end_of_day(day)))
    return buckets


def week_buckets(now: datetime, n: int) -> list[Bucket]:
    """Last ``n`` ISO weeks including the current one, labelled "YYYY-Www"."""
    buckets = []
    for offset in range(n - 1, -1, -1):
        week = week_range(now - timedelta(weeks=offset))
        iso_year, iso_week, _ = week.start.isocalendar()
        buckets.append(Bucket(f"{iso_year}-W{iso_week:02d}", week.start, week.end))
    return buckets


def month_buckets(now: datetime, n: int) -> list[Bucket]:
    """Last ``n`` calendar months including the current one, labelled "Jan"."""
    buckets = []
    for offset in range(n - 1, -1, -1):
        start = _month_start(now, offset)
        end = _month_start(now, offset - 1) - ONE_MS
        buckets.append(Bucket(start.strftime("%b"), start, end))
    return buckets


def year_buckets(now: datetime, n: int) -> list[Bucket]:
    buckets = []
    for offset in range(n - 1, -1, -1):
        year = now.year - offset
        start = datetime(year, 1, 1)
        end = datetime(year + 1, 1, 1) - ONE_MS
        buckets.append(Bucket(str(year), start, end))
    return buckets


def resolve_series(token: str | None, now: datetime) -> list[Bucket]:
    """Buckets for a trend-series filter; unknown tokens fall back to last-7-days."""
    if token == SERIES_LAST_MONTH:
        return day_buckets(now, 30, label="date")
    if token == SERIES_LAST_YEAR:
        return month_buckets(now, 12)
    return day_buckets(now, 7, label="weekday")
