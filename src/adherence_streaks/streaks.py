"""Streak calculation for daily activity histories.

Rules:
- A streak is a run of consecutive calendar days with activity.
- The streak stays active while the most recent active day is today or
  yesterday (today may simply not be logged yet).
- Once two or more days have passed, the streak is broken and the run it
  ended only counts toward the personal best.
- The personal best never drops below the floor the caller persisted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from adherence_streaks.daykeys import add_days, days_between, parse_day_key
from adherence_streaks.errors import InvalidHistory
from adherence_streaks.signals import DailyActivitySignal, validate_history

GRACE_DAYS = 1


class StreakStatus(str, Enum):
    ACTIVE = "active"
    BROKEN = "broken"


@dataclass(frozen=True)
class StreakState:
    current_days: int
    best_days: int
    status: StreakStatus
    last_day_key: str | None  # most recent active day, YYYY-MM-DD
    best_end_day: str | None = None  # last day of the run that set best_days

    @property
    def is_active(self) -> bool:
        return self.status is StreakStatus.ACTIVE

    @property
    def current_start_day(self) -> str | None:
        """First day of the active run, or None when there is none."""
        if not self.is_active or self.current_days == 0 or self.last_day_key is None:
            return None
        return add_days(self.last_day_key, -(self.current_days - 1))

    def to_dict(self) -> dict:
        return {
            "current_days": self.current_days,
            "best_days": self.best_days,
            "status": self.status.value,
            "last_day_key": self.last_day_key,
            "best_end_day": self.best_end_day,
            "current_start_day": self.current_start_day,
        }


def _active_days(history: list[DailyActivitySignal]) -> list[str]:
    return [s.day for s in history if s.has_activity]


def longest_run(history: Iterable[DailyActivitySignal]) -> tuple[int, str | None]:
    """Return (length, end_day) of the longest run of active days.

    On ties the earliest run wins. Returns (0, None) with no activity.
    """
    return _longest_run(_active_days(validate_history(history)))


def _longest_run(days: list[str]) -> tuple[int, str | None]:
    if not days:
        return (0, None)
    best_len, best_end = 1, days[0]
    run = 1
    for i in range(1, len(days)):
        if days_between(days[i], days[i - 1]) == 1:
            run += 1
        else:
            run = 1
        if run > best_len:
            best_len, best_end = run, days[i]
    return (best_len, best_end)


def _trailing_run(days: list[str]) -> int:
    """Count consecutive days backwards from the last active day."""
    streak = 1
    for i in range(len(days) - 1, 0, -1):
        if days_between(days[i], days[i - 1]) != 1:
            break
        streak += 1
    return streak


def calculate_streak(
    today: str,
    history: Iterable[DailyActivitySignal],
    stored_best_days: int = 0,
    stored_best_end_day: str | None = None,
) -> StreakState:
    """Derive the streak state for one module's history.

    history must be ascending by day with no duplicates; missing days mean no
    activity. stored_best_days is the previously persisted best, used as a
    floor. An empty history gives the broken, zero-length state.
    """
    parse_day_key(today)
    entries = validate_history(history)
    if isinstance(stored_best_days, bool) or not isinstance(stored_best_days, int):
        raise InvalidHistory(f"stored_best_days must be an int, got {stored_best_days!r}")
    if stored_best_days < 0:
        raise InvalidHistory(f"stored_best_days must be >= 0, got {stored_best_days}")
    if stored_best_end_day is not None:
        parse_day_key(stored_best_end_day)

    days = _active_days(entries)
    if not days:
        return StreakState(
            current_days=0,
            best_days=stored_best_days,
            status=StreakStatus.BROKEN,
            last_day_key=None,
            best_end_day=stored_best_end_day,
        )

    last_day = days[-1]
    gap = days_between(today, last_day)
    if gap < 0:
        raise InvalidHistory(f"Activity on {last_day} is after today ({today})")

    if gap <= GRACE_DAYS:
        status = StreakStatus.ACTIVE
        current = _trailing_run(days)
    else:
        status = StreakStatus.BROKEN
        current = 0

    run_len, run_end = _longest_run(days)
    best_days, best_end_day = stored_best_days, stored_best_end_day
    if run_len > best_days:
        best_days, best_end_day = run_len, run_end

    return StreakState(
        current_days=current,
        best_days=best_days,
        status=status,
        last_day_key=last_day,
        best_end_day=best_end_day,
    )


def is_today_logged(state: StreakState, today: str) -> bool:
    """True when the most recent active day is today."""
    return state.last_day_key is not None and state.last_day_key == today


def is_at_risk(state: StreakState, today: str, at_risk_after_days: int = 1) -> bool:
    """True when the streak is still active but will break without activity.

    at_risk_after_days is how many days must have passed since the last
    active day; the default flags an active streak that has not been logged
    today.
    """
    if not state.is_active or state.last_day_key is None:
        return False
    return days_between(today, state.last_day_key) >= at_risk_after_days
