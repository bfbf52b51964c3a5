# Overview: UTC clock, ISO-8601 parsing and calendar ranges used by sales and reports.

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime; all stored timestamps use this form."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse request/CLI date input into a naive UTC datetime.

    Accepts "2026-10-19" (midnight), "2026-10-19T14:30" (taken as UTC) and
    offset-aware forms ("...Z", "...+03:00"), which are shifted to UTC.
    Blank input gives None; malformed input raises ValueError.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Render a stored timestamp as "2026-10-19T14:30:00Z" (seconds precision)."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"


def day_bounds(day: date | datetime) -> tuple[datetime, datetime]:
    """Half-open [start, end) range covering the calendar day of `day`."""
    if isinstance(day, datetime):
        day = day.date()
    start = datetime(day.year, day.month, day.day)
    return start, start + timedelta(days=1)


def week_bounds(week_start: date | datetime) -> tuple[datetime, datetime]:
    """Half-open [week_start, week_start + 7d) range."""
    if not isinstance(week_start, datetime):
        week_start = datetime(week_start.year, week_start.month, week_start.day)
    return week_start, week_start + timedelta(days=7)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    if month == 12:
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)


def current_week_start(today: date | None = None) -> datetime:
    """Monday 00:00 of the week containing `today`."""
    today = today or utcnow().date()
    monday = today - timedelta(days=today.weekday())
    return datetime(monday.year, monday.month, monday.day)
