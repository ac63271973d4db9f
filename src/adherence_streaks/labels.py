"""Streak label helpers for UI text. Pure functions, no side effects."""

from __future__ import annotations

from enum import Enum

NEUTRAL_EMOJI = "\U0001f4c5"  # 📅

STREAK_TIERS: list[dict] = [
    {"min_days": 2, "emoji": "\U0001f331", "name": "Getting Started"},  # 🌱
    {"min_days": 3, "emoji": "\U0001f525", "name": "On Fire"},  # 🔥
    {"min_days": 7, "emoji": "⚡", "name": "One Week Strong"},
    {"min_days": 14, "emoji": "\U0001f4aa", "name": "Habit Builder"},  # 💪
    {"min_days": 30, "emoji": "\U0001f3c6", "name": "Monthly Master"},  # 🏆
    {"min_days": 100, "emoji": "\U0001f451", "name": "Centurion"},  # 👑
]


class PRStatus(str, Enum):
    NEW_PR = "new_pr"
    TIED = "tied"
    BELOW_BEST = "below_best"


def _days(n: int) -> str:
    return "1 day" if n == 1 else f"{n} days"


def pr_status(current_days: int, best_days: int) -> PRStatus:
    """Compare a run against a personal best.

    Pass the best as persisted before this run to detect a new record.
    """
    if current_days > best_days:
        return PRStatus.NEW_PR
    if current_days == best_days and current_days > 0:
        return PRStatus.TIED
    return PRStatus.BELOW_BEST


def pr_text(current_days: int, best_days: int) -> str:
    """'New PR: 11 days!', 'Best: 10 days (tied!)' or 'Best: 10 days'."""
    status = pr_status(current_days, best_days)
    if status is PRStatus.NEW_PR:
        return f"New PR: {_days(current_days)}!"
    if status is PRStatus.TIED:
        return f"Best: {_days(best_days)} (tied!)"
    return f"Best: {_days(best_days)}"


def motivation_text(current_days: int, best_days: int, max_gap: int = 2) -> str | None:
    """Nudge toward the personal best when it is within max_gap days."""
    if best_days <= 0 or current_days >= best_days:
        return None
    days_to_beat = best_days - current_days
    if days_to_beat > max_gap:
        return None
    if days_to_beat == 1:
        return "1 more day to tie your best!"
    return f"{days_to_beat} more days to tie your best!"


def streak_label(current_days: int) -> dict | None:
    """Return the highest tier reached by current_days, or None below 2 days."""
    reached = None
    for tier in STREAK_TIERS:
        if current_days >= tier["min_days"]:
            reached = tier
    return reached


def streak_emoji(current_days: int) -> str:
    """Tier emoji for current_days, falling back to a neutral calendar."""
    tier = streak_label(current_days)
    return tier["emoji"] if tier else NEUTRAL_EMOJI
