"""
Datetime helpers.

All persisted datetimes are UTC. SQLite drops tzinfo on the way back, so
values read from the store pass through ``ensure_utc`` before comparison.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return ``value`` as an aware UTC datetime; naive input is taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC [start, end) of a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def format_hhmm(value: datetime) -> str:
    return ensure_utc(value).strftime("%H:%M")


def parse_hhmm(label: str) -> time:
    """Parse an ``HH:MM`` label; raises ValueError on malformed input."""
    hours, _, minutes = label.partition(":")
    return time(int(hours), int(minutes))


def to_base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))
