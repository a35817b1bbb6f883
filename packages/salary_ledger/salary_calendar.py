"""Salary-month calendar: periods that run from the 23rd to the 22nd.

A period is identified by the month it starts in. The key ``"2025-11"``
covers 23 November 2025 00:00:00 through 22 December 2025 23:59:59. All
arithmetic uses naive local calendar fields; no timezone conversion happens.

Keys are sortable strings: periods ``YYYY-MM`` and days ``YYYY-MM-DD``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import NamedTuple

SALARY_DAY = 23

_PERIOD_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")
_DAY_KEY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class PeriodRange(NamedTuple):
    start: datetime
    end: datetime


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def format_period_key(year: int, month: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return f"{year:04d}-{month:02d}"


def parse_period_key(key: str) -> tuple[int, int]:
    """Return ``(year, month)`` for a ``YYYY-MM`` key."""

    m = _PERIOD_KEY_RE.fullmatch(key.strip()) if isinstance(key, str) else None
    if m is None:
        raise ValueError(f"invalid period key: {key!r} (expected YYYY-MM)")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"invalid period key: {key!r} (month out of range)")
    return year, month


def day_key_of(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_day_key(key: str) -> date:
    m = _DAY_KEY_RE.fullmatch(key.strip()) if isinstance(key, str) else None
    if m is None:
        raise ValueError(f"invalid day key: {key!r} (expected YYYY-MM-DD)")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as exc:
        raise ValueError(f"invalid day key: {key!r}") from exc


def _next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def _prev_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def shift_period(key: str, n: int) -> str:
    """Return the key ``n`` periods after ``key`` (negative ``n`` goes back)."""

    year, month = parse_period_key(key)
    index = year * 12 + (month - 1) + n
    return format_period_key(index // 12, index % 12 + 1)


# ---------------------------------------------------------------------------
# Period arithmetic
# ---------------------------------------------------------------------------


def period_key_of(d: date) -> str:
    """Key of the salary period containing ``d``.

    Days before the 23rd belong to the period that started the month before.
    """

    year, month = d.year, d.month
    if d.day < SALARY_DAY:
        year, month = _prev_month(year, month)
    return format_period_key(year, month)


def range_of(key: str) -> PeriodRange:
    year, month = parse_period_key(key)
    end_year, end_month = _next_month(year, month)
    return PeriodRange(
        start=datetime(year, month, SALARY_DAY),
        end=datetime(end_year, end_month, SALARY_DAY - 1, 23, 59, 59),
    )


def contains(d: datetime, key: str) -> bool:
    start, end = range_of(key)
    if not isinstance(d, datetime):
        d = datetime(d.year, d.month, d.day)
    return start <= d <= end


def length_of(key: str) -> int:
    """Number of days in the period, 28 to 31."""

    start, end = range_of(key)
    return (end.date() - start.date()).days + 1


def day_index_within(d: date) -> int:
    """1-based position of ``d`` inside its own period (the 23rd is day 1)."""

    start, _ = range_of(period_key_of(d))
    day = d.date() if isinstance(d, datetime) else d
    return (day - start.date()).days + 1


def period_days(key: str) -> list[date]:
    """Every calendar day of the period, in order."""

    start, _ = range_of(key)
    first = start.date()
    return [first + timedelta(days=i) for i in range(length_of(key))]


def format_period_label(key: str) -> str:
    """Human-readable span, e.g. ``"23 Nov - 22 Dec"``."""

    start, end = range_of(key)
    return f"{start.day} {_MONTH_ABBR[start.month - 1]} - {end.day} {_MONTH_ABBR[end.month - 1]}"


__all__ = [
    "SALARY_DAY",
    "PeriodRange",
    "contains",
    "day_index_within",
    "day_key_of",
    "format_period_key",
    "format_period_label",
    "length_of",
    "parse_day_key",
    "parse_period_key",
    "period_days",
    "period_key_of",
    "range_of",
    "shift_period",
]
