"""Tests for the streak calculator."""

import pytest

from adherence_streaks.daykeys import add_days
from adherence_streaks.errors import InvalidDateKey, InvalidHistory
from adherence_streaks.signals import DailyActivitySignal
from adherence_streaks.streaks import (
    StreakState,
    StreakStatus,
    calculate_streak,
    is_at_risk,
    is_today_logged,
    longest_run,
)

TODAY = "2024-06-10"


def _history(*days, inactive=()):
    """Build an ascending history of active days plus explicit inactive days."""
    signals = [DailyActivitySignal(day=d, has_activity=True, count=1) for d in days]
    signals += [DailyActivitySignal(day=d, has_activity=False, count=0) for d in inactive]
    return sorted(signals, key=lambda s: s.day)


def _run(end, length):
    """`length` consecutive active days ending at `end`."""
    return _history(*(add_days(end, -i) for i in range(length - 1, -1, -1)))


class TestScenarios:
    """Worked examples of streak state over a short history."""

    def test_five_day_run_ending_today(self):
        history = _history("2024-06-06", "2024-06-07", "2024-06-08", "2024-06-09", "2024-06-10")
        state = calculate_streak(TODAY, history)
        assert state.current_days == 5
        assert state.status is StreakStatus.ACTIVE
        assert state.last_day_key == "2024-06-10"

    def test_run_ending_two_days_ago_is_broken_but_sets_best(self):
        history = _run("2024-06-08", 8)
        state = calculate_streak(TODAY, history, stored_best_days=5)
        assert state.current_days == 0
        assert state.status is StreakStatus.BROKEN
        assert state.last_day_key == "2024-06-08"
        assert state.best_days == 8
        assert state.best_end_day == "2024-06-08"


class TestCalculateStreak:
    """Tests for calculate_streak function."""

    def test_empty_history(self):
        state = calculate_streak(TODAY, [])
        assert state == StreakState(
            current_days=0, best_days=0, status=StreakStatus.BROKEN, last_day_key=None
        )

    def test_empty_history_keeps_stored_best(self):
        state = calculate_streak(TODAY, [], stored_best_days=12, stored_best_end_day="2024-01-12")
        assert state.best_days == 12
        assert state.best_end_day == "2024-01-12"
        assert state.current_days == 0

    def test_only_inactive_days(self):
        history = _history(inactive=("2024-06-08", "2024-06-09", "2024-06-10"))
        state = calculate_streak(TODAY, history)
        assert state.last_day_key is None
        assert state.status is StreakStatus.BROKEN
        assert state.current_days == 0

    def test_run_ending_yesterday_is_active(self):
        state = calculate_streak(TODAY, _run("2024-06-09", 3))
        assert state.status is StreakStatus.ACTIVE
        assert state.current_days == 3
        assert state.last_day_key == "2024-06-09"

    def test_single_day_today(self):
        state = calculate_streak(TODAY, _history(TODAY))
        assert state.current_days == 1
        assert state.best_days == 1

    def test_gap_stops_the_walk(self):
        history = _history("2024-06-05", "2024-06-06", "2024-06-08", "2024-06-09", "2024-06-10")
        state = calculate_streak(TODAY, history)
        assert state.current_days == 3

    def test_inactive_entry_breaks_run(self):
        history = _history("2024-06-07", "2024-06-09", "2024-06-10", inactive=("2024-06-08",))
        state = calculate_streak(TODAY, history)
        assert state.current_days == 2

    def test_count_without_flag_does_not_count(self):
        history = [
            DailyActivitySignal(day="2024-06-09", has_activity=True, count=1),
            DailyActivitySignal(day="2024-06-10", has_activity=False, count=4),
        ]
        state = calculate_streak(TODAY, history)
        assert state.last_day_key == "2024-06-09"
        assert state.current_days == 1

    def test_historical_best_kept_when_current_shorter(self):
        history = _run("2024-05-20", 6) + _run(TODAY, 2)
        state = calculate_streak(TODAY, history)
        assert state.current_days == 2
        assert state.best_days == 6
        assert state.best_end_day == "2024-05-20"

    def test_stored_best_is_a_floor(self):
        state = calculate_streak(TODAY, _run(TODAY, 3), stored_best_days=20)
        assert state.current_days == 3
        assert state.best_days == 20

    def test_tied_stored_best_keeps_stored_end_day(self):
        state = calculate_streak(
            TODAY, _run(TODAY, 10), stored_best_days=10, stored_best_end_day="2024-03-01"
        )
        assert state.best_days == 10
        assert state.best_end_day == "2024-03-01"

    def test_run_beating_stored_best(self):
        state = calculate_streak(TODAY, _run(TODAY, 11), stored_best_days=10)
        assert state.best_days == 11
        assert state.best_end_day == TODAY

    def test_crosses_month_and_year(self):
        history = _run("2024-01-01", 4)
        state = calculate_streak("2024-01-02", history)
        assert state.current_days == 4
        assert state.current_start_day == "2023-12-29"

    def test_crosses_leap_day(self):
        history = _history("2024-02-28", "2024-02-29", "2024-03-01")
        assert calculate_streak("2024-03-01", history).current_days == 3

    def test_current_start_day(self):
        state = calculate_streak(TODAY, _run(TODAY, 5))
        assert state.current_start_day == "2024-06-06"

    def test_current_start_day_none_when_broken(self):
        state = calculate_streak(TODAY, _run("2024-06-01", 5))
        assert state.current_start_day is None

    def test_to_dict(self):
        data = calculate_streak(TODAY, _run(TODAY, 2)).to_dict()
        assert data["status"] == "active"
        assert data["current_days"] == 2
        assert data["current_start_day"] == "2024-06-09"


class TestCalculateStreakErrors:
    """Tests for calculate_streak input validation."""

    def test_unsorted_history(self):
        history = list(reversed(_run(TODAY, 3)))
        with pytest.raises(InvalidHistory):
            calculate_streak(TODAY, history)

    def test_duplicate_day(self):
        with pytest.raises(InvalidHistory):
            calculate_streak(TODAY, _history(TODAY) + _history(TODAY))

    def test_negative_count(self):
        history = [DailyActivitySignal(day=TODAY, has_activity=True, count=-1)]
        with pytest.raises(InvalidHistory):
            calculate_streak(TODAY, history)

    def test_bad_today(self):
        with pytest.raises(InvalidDateKey):
            calculate_streak("2024-06-31", [])

    def test_negative_stored_best(self):
        with pytest.raises(InvalidHistory):
            calculate_streak(TODAY, [], stored_best_days=-1)

    def test_activity_after_today(self):
        with pytest.raises(InvalidHistory, match="after today"):
            calculate_streak(TODAY, _history("2024-06-11"))


class TestProperties:
    """Invariants that hold for any history."""

    @pytest.mark.parametrize("k", [1, 2, 5, 7, 30, 400])
    @pytest.mark.parametrize("end_offset", [0, -1])
    def test_contiguity(self, k, end_offset):
        state = calculate_streak(TODAY, _run(add_days(TODAY, end_offset), k))
        assert state.current_days == k
        assert state.status is StreakStatus.ACTIVE
        assert state.best_days >= state.current_days

    @pytest.mark.parametrize("k", [1, 3, 50])
    @pytest.mark.parametrize("end_offset", [-2, -3, -30])
    def test_break_detection(self, k, end_offset):
        state = calculate_streak(TODAY, _run(add_days(TODAY, end_offset), k))
        assert state.current_days == 0
        assert state.status is StreakStatus.BROKEN
        assert state.best_days == k

    def test_best_monotonic_as_history_grows(self):
        # Irregular pattern: runs of 3, 1, 5, 2 with gaps, revealed day by day
        pattern = [1, 1, 1, 0, 1, 0, 0, 1, 1, 1, 1, 1, 0, 1, 1]
        start = "2024-05-01"
        signals = []
        previous_best = 0
        for i, active in enumerate(pattern):
            day = add_days(start, i)
            signals.append(DailyActivitySignal(day=day, has_activity=bool(active), count=active))
            state = calculate_streak(day, signals, stored_best_days=2)
            assert state.best_days >= previous_best
            assert state.best_days >= state.current_days
            assert state.best_days >= 2
            previous_best = state.best_days
        assert previous_best == 5

    def test_idempotent(self):
        history = _run("2024-05-01", 4) + _run(TODAY, 3)
        first = calculate_streak(TODAY, history, stored_best_days=3)
        second = calculate_streak(TODAY, history, stored_best_days=3)
        assert first == second
        assert history == _run("2024-05-01", 4) + _run(TODAY, 3)

    def test_broken_implies_zero(self):
        for end in ("2024-06-01", "2024-06-08", "2024-06-09", TODAY):
            state = calculate_streak(TODAY, _run(end, 4))
            if state.status is StreakStatus.BROKEN:
                assert state.current_days == 0


class TestLongestRun:
    """Tests for longest_run function."""

    def test_empty(self):
        assert longest_run([]) == (0, None)

    def test_single_run(self):
        assert longest_run(_run(TODAY, 4)) == (4, TODAY)

    def test_earliest_wins_ties(self):
        history = _run("2024-06-03", 3) + _run(TODAY, 3)
        assert longest_run(history) == (3, "2024-06-03")

    def test_later_longer_run(self):
        history = _run("2024-06-03", 2) + _run(TODAY, 4)
        assert longest_run(history) == (4, TODAY)


class TestTodayLoggedAndAtRisk:
    """Tests for is_today_logged and is_at_risk."""

    def test_logged_today(self):
        state = calculate_streak(TODAY, _run(TODAY, 2))
        assert is_today_logged(state, TODAY) is True
        assert is_at_risk(state, TODAY) is False

    def test_active_from_yesterday_is_at_risk(self):
        state = calculate_streak(TODAY, _run("2024-06-09", 2))
        assert is_today_logged(state, TODAY) is False
        assert is_at_risk(state, TODAY) is True

    def test_broken_is_not_at_risk(self):
        state = calculate_streak(TODAY, _run("2024-06-05", 2))
        assert is_at_risk(state, TODAY) is False

    def test_no_history(self):
        state = calculate_streak(TODAY, [])
        assert is_today_logged(state, TODAY) is False
        assert is_at_risk(state, TODAY) is False

    def test_threshold_zero_flags_any_active_streak(self):
        state = calculate_streak(TODAY, _run(TODAY, 2))
        assert is_at_risk(state, TODAY, at_risk_after_days=0) is True

    def test_threshold_above_grace_never_flags(self):
        state = calculate_streak(TODAY, _run("2024-06-09", 2))
        assert is_at_risk(state, TODAY, at_risk_after_days=2) is False
