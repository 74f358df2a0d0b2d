"""
Date/time helpers.

Visit dates and the submission clock are expressed in the inspector's timezone
(`app.timezone`, default `Asia/Jakarta`), never in the host's local time.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo


def now_in(timezone: str) -> datetime:
    """Return the current timezone-aware datetime in `timezone`."""
    return datetime.now(ZoneInfo(timezone))


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def visit_date(timezone: str, *, now: datetime | None = None) -> str:
    """ISO calendar date (YYYY-MM-DD) used as the visit date."""
    current = ensure_tz(now, timezone) if now is not None else now_in(timezone)
    return current.astimezone(ZoneInfo(timezone)).date().isoformat()


def clock_hhmm(timezone: str, *, now: datetime | None = None) -> str:
    """Zero-padded `HH:MM` stamped on a submitted visit."""
    current = ensure_tz(now, timezone) if now is not None else now_in(timezone)
    return current.astimezone(ZoneInfo(timezone)).strftime("%H:%M")
