"""Daily activity signals and history validation.

Deciding what counts as activity for a module happens before this point:
callers hand in explicit ``has_activity`` flags, or a predicate to
``signals_from_counts``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from adherence_streaks.daykeys import parse_day_key
from adherence_streaks.errors import InvalidDateKey, InvalidHistory


class ActivityModule(str, Enum):
    LOGIN = "login"
    FOOD = "food"
    MEDICATION = "medication"
    EXERCISE = "exercise"
    WATER = "water"
    WEIGHT = "weight"


@dataclass(frozen=True)
class DailyActivitySignal:
    day: str  # YYYY-MM-DD
    has_activity: bool
    count: int = 0


def parse_module(name: str | ActivityModule) -> ActivityModule:
    """Resolve a module name ("food", "FOOD") to an ActivityModule.

    Raises ValueError listing the known modules for anything else.
    """
    if isinstance(name, ActivityModule):
        return name
    try:
        return ActivityModule(str(name).strip().lower())
    except ValueError:
        known = ", ".join(m.value for m in ActivityModule)
        raise ValueError(f"Unknown module {name!r}. Must be one of: {known}") from None


def validate_history(history: Iterable[DailyActivitySignal]) -> list[DailyActivitySignal]:
    """Check a history is strictly ascending with well-formed entries.

    Returns the history as a list. Raises InvalidHistory for unsorted or
    duplicate days, negative or non-integer counts, non-bool flags and
    malformed day keys.
    """
    entries = list(history)
    prev_day: str | None = None
    for i, signal in enumerate(entries):
        if not isinstance(signal, DailyActivitySignal):
            raise InvalidHistory(f"Entry {i} is not a DailyActivitySignal: {signal!r}")
        try:
            parse_day_key(signal.day)
        except InvalidDateKey as exc:
            raise InvalidHistory(f"Entry {i} has a bad day: {exc}") from exc
        if not isinstance(signal.has_activity, bool):
            raise InvalidHistory(f"Entry {i} ({signal.day}): has_activity must be a bool")
        if isinstance(signal.count, bool) or not isinstance(signal.count, int):
            raise InvalidHistory(f"Entry {i} ({signal.day}): count must be an int")
        if signal.count < 0:
            raise InvalidHistory(f"Entry {i} ({signal.day}): negative count {signal.count}")
        if prev_day is not None:
            # Well-formed keys sort lexically in calendar order.
            if signal.day == prev_day:
                raise InvalidHistory(f"Duplicate day in history: {signal.day}")
            if signal.day < prev_day:
                raise InvalidHistory(f"History is not sorted: {signal.day} follows {prev_day}")
        prev_day = signal.day
    return entries


def signals_from_counts(
    counts: Mapping[str, int],
    is_active: Callable[[int], bool] | None = None,
) -> list[DailyActivitySignal]:
    """Build an ascending history from a day -> count mapping.

    is_active classifies a day's count; the default treats any count > 0 as
    activity.
    """
    classify = is_active or (lambda count: count > 0)
    for day in counts:
        parse_day_key(day)
    history = [
        DailyActivitySignal(day=day, has_activity=bool(classify(count)), count=count)
        for day, count in sorted(counts.items())
    ]
    return validate_history(history)


def signals_from_records(records: Iterable[Mapping]) -> list[DailyActivitySignal]:
    """Build a history from JSON-style records.

    Each record has "day" and "count", and optionally "hasActivity" or
    "has_activity" (defaults to count > 0). Records are sorted by day before
    validation; duplicate days still raise InvalidHistory.
    """
    history: list[DailyActivitySignal] = []
    for i, record in enumerate(records):
        if not isinstance(record, Mapping) or "day" not in record:
            raise InvalidHistory(f"Record {i} must be an object with a 'day' key")
        count = record.get("count", 0)
        if "hasActivity" in record:
            has_activity = record["hasActivity"]
        elif "has_activity" in record:
            has_activity = record["has_activity"]
        else:
            has_activity = isinstance(count, int) and count > 0
        history.append(DailyActivitySignal(day=record["day"], has_activity=has_activity, count=count))
    try:
        history.sort(key=lambda s: s.day)
    except TypeError as exc:
        raise InvalidHistory(f"Record days must be strings: {exc}") from exc
    return validate_history(history)
