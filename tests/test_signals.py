"""Tests for daily activity signals and history validation."""

import pytest

from adherence_streaks.errors import InvalidHistory
from adherence_streaks.signals import (
    ActivityModule,
    DailyActivitySignal,
    parse_module,
    signals_from_counts,
    signals_from_records,
    validate_history,
)


def _sig(day, active=True, count=1):
    return DailyActivitySignal(day=day, has_activity=active, count=count)


class TestValidateHistory:
    """Tests for validate_history function."""

    def test_empty_is_valid(self):
        assert validate_history([]) == []

    def test_sorted_history_returned_as_list(self):
        history = (_sig("2024-06-01"), _sig("2024-06-03"))
        assert validate_history(history) == list(history)

    def test_unsorted_rejected(self):
        with pytest.raises(InvalidHistory, match="not sorted"):
            validate_history([_sig("2024-06-03"), _sig("2024-06-01")])

    def test_duplicate_day_rejected(self):
        with pytest.raises(InvalidHistory, match="Duplicate"):
            validate_history([_sig("2024-06-01"), _sig("2024-06-01")])

    def test_negative_count_rejected(self):
        with pytest.raises(InvalidHistory, match="negative"):
            validate_history([_sig("2024-06-01", count=-1)])

    def test_malformed_day_rejected(self):
        with pytest.raises(InvalidHistory):
            validate_history([_sig("2024-6-1")])

    def test_non_bool_flag_rejected(self):
        with pytest.raises(InvalidHistory):
            validate_history([DailyActivitySignal(day="2024-06-01", has_activity=1, count=1)])

    def test_non_int_count_rejected(self):
        with pytest.raises(InvalidHistory):
            validate_history([DailyActivitySignal(day="2024-06-01", has_activity=True, count=1.5)])

    def test_non_signal_entry_rejected(self):
        with pytest.raises(InvalidHistory):
            validate_history([{"day": "2024-06-01"}])

    def test_inactive_days_allowed(self):
        history = [_sig("2024-06-01", active=False, count=0), _sig("2024-06-02")]
        assert len(validate_history(history)) == 2


class TestSignalsFromCounts:
    """Tests for signals_from_counts function."""

    def test_default_classifier(self):
        history = signals_from_counts({"2024-06-02": 0, "2024-06-01": 3})
        assert [s.day for s in history] == ["2024-06-01", "2024-06-02"]
        assert [s.has_activity for s in history] == [True, False]
        assert history[0].count == 3

    def test_custom_classifier(self):
        history = signals_from_counts(
            {"2024-06-01": 1, "2024-06-02": 4},
            is_active=lambda count: count >= 3,
        )
        assert [s.has_activity for s in history] == [False, True]

    def test_negative_count_rejected(self):
        with pytest.raises(InvalidHistory):
            signals_from_counts({"2024-06-01": -2})


class TestSignalsFromRecords:
    """Tests for signals_from_records function."""

    def test_camel_case_flag(self):
        history = signals_from_records([
            {"day": "2024-06-02", "hasActivity": True, "count": 2},
            {"day": "2024-06-01", "hasActivity": False, "count": 0},
        ])
        assert [s.day for s in history] == ["2024-06-01", "2024-06-02"]
        assert history[1].has_activity is True

    def test_snake_case_flag(self):
        history = signals_from_records([{"day": "2024-06-01", "has_activity": True, "count": 0}])
        assert history[0].has_activity is True

    def test_flag_defaults_from_count(self):
        history = signals_from_records([{"day": "2024-06-01", "count": 2}])
        assert history[0].has_activity is True

    def test_duplicate_days_rejected(self):
        with pytest.raises(InvalidHistory):
            signals_from_records([{"day": "2024-06-01"}, {"day": "2024-06-01"}])

    def test_missing_day_rejected(self):
        with pytest.raises(InvalidHistory):
            signals_from_records([{"count": 1}])


class TestParseModule:
    def test_by_value(self):
        assert parse_module("food") is ActivityModule.FOOD

    def test_case_insensitive(self):
        assert parse_module("Medication") is ActivityModule.MEDICATION

    def test_passthrough(self):
        assert parse_module(ActivityModule.LOGIN) is ActivityModule.LOGIN

    def test_unknown_module(self):
        with pytest.raises(ValueError, match="Unknown module"):
            parse_module("sleep")
