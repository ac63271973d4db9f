"""Calendar-day key arithmetic. Pure functions, no side effects.

A day key is a ``YYYY-MM-DD`` string naming one local calendar day. Keys never
carry a time of day or a timezone, so stepping by whole days cannot drift
across DST changes.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from adherence_streaks.errors import InvalidDateKey

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_day_key(key: str) -> date:
    """Parse a YYYY-MM-DD key to a date. Raises InvalidDateKey on bad input."""
    if not isinstance(key, str) or not _DAY_KEY_RE.match(key):
        raise InvalidDateKey(f"Invalid day key: {key!r} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(key)
    except ValueError as exc:
        raise InvalidDateKey(f"Invalid day key: {key!r} ({exc})") from exc


def day_key(value: date) -> str:
    """Format a date as a day key. datetimes are rejected."""
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidDateKey(f"Expected a calendar date, got {value!r}")
    return value.isoformat()


def today_key() -> str:
    """Return the local calendar day as a key."""
    return date.today().isoformat()


def add_days(key: str, n: int) -> str:
    """Shift a day key by n whole days (n may be negative)."""
    try:
        return (parse_day_key(key) + timedelta(days=n)).isoformat()
    except OverflowError as exc:
        raise InvalidDateKey(f"{key!r} shifted by {n} days is out of range") from exc


def compare_days(a: str, b: str) -> int:
    """Return -1, 0 or 1 as day a is before, equal to, or after day b."""
    da, db = parse_day_key(a), parse_day_key(b)
    if da < db:
        return -1
    if da > db:
        return 1
    return 0


def days_between(a: str, b: str) -> int:
    """Return a - b in whole days. Negative when a is before b."""
    return (parse_day_key(a) - parse_day_key(b)).days


def day_range(end: str, length: int) -> list[str]:
    """Return `length` consecutive day keys ending at `end`, oldest first."""
    if length < 0:
        raise ValueError(f"length must be >= 0, got {length}")
    end_date = parse_day_key(end)
    if length == 0:
        return []
    try:
        start = end_date - timedelta(days=length - 1)
    except OverflowError as exc:
        raise InvalidDateKey(f"{length} days ending at {end!r} is out of range") from exc
    return [(start + timedelta(days=i)).isoformat() for i in range(length)]
