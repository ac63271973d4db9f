"""Per-module streak summaries built from the log store.

Glue between the store, the pure engine and the display/MCP layers.
"""

from __future__ import annotations

import logging

from adherence_streaks.config import Settings
from adherence_streaks.daykeys import day_range
from adherence_streaks.db import Database
from adherence_streaks.heatmap import Heatmap, build_heatmap
from adherence_streaks.labels import (
    motivation_text,
    pr_status,
    pr_text,
    streak_emoji,
    streak_label,
)
from adherence_streaks.signals import ActivityModule
from adherence_streaks.streaks import calculate_streak, is_at_risk, is_today_logged
from adherence_streaks.week import build_week_indicator, week_days

logger = logging.getLogger(__name__)


def build_module_summary(
    db: Database,
    module: ActivityModule,
    today: str,
    settings: Settings,
) -> dict:
    """Compute the streak summary for one module and persist a raised best.

    A current run is compared with the best as it stood when that run began,
    so a run that passed it keeps reading as a new record on every read.
    Otherwise the PR text shows the (possibly raised) best.
    """
    stored = db.get_streak_state(module) or {}
    previous_best = int(stored.get("best_days") or 0)
    history = db.get_history(module)

    state = calculate_streak(
        today,
        history,
        stored_best_days=previous_best,
        stored_best_end_day=stored.get("best_end_day"),
    )
    if state.best_days > previous_best:
        logger.info(
            "New best for %s: %d days (was %d)", module.value, state.best_days, previous_best
        )
    run_start = state.current_start_day
    if run_start is not None and stored.get("run_start_day") == run_start:
        best_before_run = int(stored.get("best_before_run") or 0)
    else:
        best_before_run = previous_best
    db.save_streak_state(module, state, best_before_run=best_before_run)

    baseline = best_before_run if state.current_days >= state.best_days else state.best_days
    tier = streak_label(state.current_days)
    result = state.to_dict()
    result.update({
        "module": module.value,
        "today": today,
        "previous_best_days": best_before_run,
        "first_day": db.first_day(module),
        "week": build_week_indicator(today, state),
        "week_days": week_days(today),
        "today_logged": is_today_logged(state, today),
        "at_risk": is_at_risk(state, today, settings.at_risk_after_days),
        "pr_status": pr_status(state.current_days, baseline).value,
        "pr_text": pr_text(state.current_days, baseline),
        "motivation": motivation_text(
            state.current_days, state.best_days, settings.motivation_max_gap
        ),
        "emoji": streak_emoji(state.current_days),
        "tier": tier["name"] if tier else None,
    })
    return result


def build_module_heatmap(
    db: Database,
    module: ActivityModule,
    today: str,
    settings: Settings,
    weeks: int | None = None,
) -> Heatmap:
    """Build the heatmap for one module from stored counts."""
    n_weeks = weeks or settings.heatmap_weeks
    window = day_range(today, n_weeks * 7)
    counts = db.get_counts(module, window[0], window[-1])
    return build_heatmap(today, counts, weeks=n_weeks, buckets=settings.buckets_for(module))


def build_dashboard(db: Database, today: str, settings: Settings) -> list[dict]:
    """Summaries for every module with stored data."""
    return [
        build_module_summary(db, module, today, settings)
        for module in db.modules_with_data()
    ]
