"""Seven-day streak indicator for calendar-style widgets."""

from __future__ import annotations

from adherence_streaks.daykeys import add_days, compare_days, day_range
from adherence_streaks.streaks import StreakState, StreakStatus

WEEK_LENGTH = 7


def week_days(today: str) -> list[str]:
    """Return the last 7 day keys, index 0 = today-6, index 6 = today."""
    return day_range(today, WEEK_LENGTH)


def build_week_indicator(today: str, state: StreakState) -> list[bool]:
    """Mark which of the last 7 days belong to the active run.

    Days with activity from before the current run are not marked. A broken
    or empty streak gives seven False entries.
    """
    days = week_days(today)
    if (
        state.status is StreakStatus.BROKEN
        or state.current_days <= 0
        or state.last_day_key is None
    ):
        return [False] * WEEK_LENGTH

    last_day = state.last_day_key
    start_day = add_days(last_day, -(state.current_days - 1))
    return [
        compare_days(start_day, d) <= 0 and compare_days(d, last_day) <= 0
        for d in days
    ]
