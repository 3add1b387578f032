"""Worked-time arithmetic for time records.

Everything here is pure: callers pass ``now`` explicitly, so the functions
can be tested without clocks or timers. Timestamps are compared as naive
UTC; timezone-aware values are converted first.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from timedesk.localization.helpers import t

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in time records."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Milliseconds from start to end (negative if end is earlier)."""
    delta = as_naive_utc(end) - as_naive_utc(start)
    return (delta.days * 86_400 + delta.seconds) * MS_PER_SECOND + delta.microseconds // 1000


def worked_ms(
    now: datetime,
    start_time: Optional[datetime],
    pause_duration_minutes: int = 0,
    pause_started_at: Optional[datetime] = None,
) -> int:
    """Worked milliseconds of a session.

    ``(now - start_time) - accumulated pauses - the pause in progress``,
    clamped at zero. A session that never started has worked nothing.
    """
    if start_time is None:
        return 0
    total = elapsed_ms(start_time, now)
    total -= max(0, pause_duration_minutes or 0) * MS_PER_MINUTE
    if pause_started_at is not None:
        total -= max(0, elapsed_ms(pause_started_at, now))
    return max(0, total)


def pause_minutes_after_resume(
    pause_duration_minutes: int,
    pause_started_at: datetime,
    now: datetime,
) -> int:
    """Cumulative pause minutes once the current pause ends at ``now``."""
    paused = max(0, elapsed_ms(pause_started_at, now))
    return (pause_duration_minutes or 0) + paused // MS_PER_MINUTE


def hours_from_ms(milliseconds: int) -> float:
    return milliseconds / MS_PER_HOUR


def format_duration(milliseconds: int) -> str:
    """Render milliseconds as ``HH:MM:SS``."""
    milliseconds = max(0, int(milliseconds))
    hours = milliseconds // MS_PER_HOUR
    minutes = (milliseconds % MS_PER_HOUR) // MS_PER_MINUTE
    seconds = (milliseconds % MS_PER_MINUTE) // MS_PER_SECOND
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_hours_minutes(milliseconds: int, locale: str = "en") -> str:
    """Render milliseconds as ``"{h}h {m}m"`` in the given locale."""
    milliseconds = max(0, int(milliseconds))
    return t(
        "duration.hours_minutes",
        locale,
        hours=milliseconds // MS_PER_HOUR,
        minutes=(milliseconds % MS_PER_HOUR) // MS_PER_MINUTE,
    )


def progress_percent(milliseconds: int, daily_hours: float) -> float:
    """Share of the daily target already worked, capped at 100."""
    if not daily_hours or daily_hours <= 0:
        return 0.0
    return round(min(100.0, hours_from_ms(milliseconds) / daily_hours * 100), 2)


def format_hours(hours: float, locale: str = "en") -> str:
    """Render fractional hours as ``"{h}h {m}m"``."""
    return format_hours_minutes(int(round((hours or 0) * MS_PER_HOUR)), locale)
