"""
Time parsing, timezone normalization and human-readable durations.

All ETAs and sync timestamps are timezone-aware datetimes; naive values are given the
configured timezone at the edges (CLI input) so comparisons never mix naive and aware.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def parse_datetime(value: str, timezone: str) -> datetime:
    """Parse ISO-8601 datetime string and ensure tzinfo is present.

    Notes:
    - Accepts a trailing `Z` (UTC) and converts it to `+00:00` for `fromisoformat`.
    - If the parsed value is naive, the provided `timezone` is attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    return ensure_tz(dt, timezone)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def format_duration(duration: timedelta) -> str:
    """Render a passage duration, e.g. `3 hours 20 minutes` or `2 Days 5 hours`."""
    total = max(0, int(duration.total_seconds()))
    days = total // 86400
    hours = (total % 86400) // 3600
    minutes = (total % 3600) // 60
    if days > 0:
        return f"{_plural(days, 'Day')} {_plural(hours, 'hour')}"
    return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"


def format_since(then: datetime | None, now: datetime) -> str:
    """Relative label for a past instant (used for "last synced" status lines)."""
    if then is None:
        return "Never synced"
    elapsed = (now - then).total_seconds()
    if elapsed < 60:
        return "Just now"
    if elapsed < 3600:
        return f"{_plural(int(elapsed // 60), 'minute')} ago"
    if elapsed < 86400:
        return f"{_plural(int(elapsed // 3600), 'hour')} ago"
    return then.strftime("%Y-%m-%d %H:%M")
