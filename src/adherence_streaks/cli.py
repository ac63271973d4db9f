"""CLI commands for adherence-streaks."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from adherence_streaks.config import (
    SCALAR_SETTINGS,
    get_settings,
    set_heatmap_thresholds,
    set_setting,
)
from adherence_streaks.daykeys import parse_day_key, today_key
from adherence_streaks.db import Database
from adherence_streaks.display import (
    print_config,
    print_dashboard,
    print_error,
    print_heatmap,
    print_import_result,
    print_log_result,
    print_no_data_message,
    print_streak,
)
from adherence_streaks.errors import StreakEngineError
from adherence_streaks.signals import ActivityModule, parse_module, signals_from_records
from adherence_streaks.summary import build_dashboard, build_module_heatmap, build_module_summary

logger = logging.getLogger(__name__)

_MODULE_CHOICES = [m.value for m in ActivityModule]


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="adherence-streaks",
        description="Daily adherence streaks and heatmaps for health logging",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    dash_p = subparsers.add_parser("dashboard", help="Show streaks for every module")
    dash_p.add_argument("--today", default=None, help="Override today (YYYY-MM-DD)")

    log_p = subparsers.add_parser("log", help="Log activity for a module")
    log_p.add_argument("module", choices=_MODULE_CHOICES)
    log_p.add_argument("--date", "-d", default=None, help="Day to log (YYYY-MM-DD), default today")
    log_p.add_argument("--count", "-c", type=int, default=1, help="Entries to add (default 1)")

    set_p = subparsers.add_parser("set", help="Overwrite a day's count for a module")
    set_p.add_argument("module", choices=_MODULE_CHOICES)
    set_p.add_argument("day", help="Day (YYYY-MM-DD)")
    set_p.add_argument("count", type=int)

    streak_p = subparsers.add_parser("streak", help="Detailed streak for one module")
    streak_p.add_argument("module", choices=_MODULE_CHOICES)
    streak_p.add_argument("--today", default=None, help="Override today (YYYY-MM-DD)")

    heat_p = subparsers.add_parser("heatmap", help="Show the activity heatmap for one module")
    heat_p.add_argument("module", choices=_MODULE_CHOICES)
    heat_p.add_argument("--weeks", "-w", type=int, default=None, help="Weeks to show")
    heat_p.add_argument("--today", default=None, help="Override today (YYYY-MM-DD)")

    import_p = subparsers.add_parser("import", help="Import a JSON list of daily signals")
    import_p.add_argument("module", choices=_MODULE_CHOICES)
    import_p.add_argument("file", type=Path)

    cfg_p = subparsers.add_parser("config", help="Show or change settings")
    cfg_sub = cfg_p.add_subparsers(dest="config_command")
    cfg_sub.add_parser("show", help="Show current settings")
    cfg_set_p = cfg_sub.add_parser("set", help="Set a numeric setting")
    cfg_set_p.add_argument("key", choices=sorted(SCALAR_SETTINGS))
    cfg_set_p.add_argument("value", type=int)
    cfg_buckets_p = cfg_sub.add_parser("buckets", help="Set heatmap score thresholds")
    cfg_buckets_p.add_argument("module", choices=_MODULE_CHOICES)
    cfg_buckets_p.add_argument("thresholds", type=int, nargs=3, metavar="T")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    command = args.command or "dashboard"

    if command == "config":
        try:
            do_config(args)
        except ValueError as exc:
            print_error(str(exc))
            sys.exit(1)
        return

    db = Database()
    try:
        if command == "dashboard":
            do_dashboard(db, today=getattr(args, "today", None))
        elif command == "log":
            do_log(db, parse_module(args.module), day=args.date, count=args.count)
        elif command == "set":
            do_set(db, parse_module(args.module), day=args.day, count=args.count)
        elif command == "streak":
            do_streak(db, parse_module(args.module), today=args.today)
        elif command == "heatmap":
            do_heatmap(db, parse_module(args.module), weeks=args.weeks, today=args.today)
        elif command == "import":
            do_import(db, parse_module(args.module), args.file)
    except (StreakEngineError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", command, exc_info=True)
        print_error(str(exc))
        sys.exit(1)
    finally:
        db.close()


def _resolve_today(today: str | None) -> str:
    if today is None:
        return today_key()
    parse_day_key(today)
    return today


def do_dashboard(db: Database, today: str | None = None) -> list[dict]:
    """Show every module that has data. Returns the summaries."""
    summaries = build_dashboard(db, _resolve_today(today), get_settings())
    if not summaries:
        print_no_data_message()
        return []
    print_dashboard(summaries)
    return summaries


def do_log(db: Database, module: ActivityModule, day: str | None = None, count: int = 1) -> int:
    """Add count entries for a day (default today). Returns the day's total."""
    day = _resolve_today(day)
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")
    total = db.record_activity(module, day, count)
    print_log_result(module.value, day, total)
    return total


def do_set(db: Database, module: ActivityModule, day: str, count: int) -> int:
    """Overwrite a day's count. A count of 0 marks the day inactive."""
    parse_day_key(day)
    db.set_daily_count(module, day, count)
    print_log_result(module.value, day, count)
    return count


def do_streak(db: Database, module: ActivityModule, today: str | None = None) -> dict:
    """Show the detailed streak for one module."""
    summary = build_module_summary(db, module, _resolve_today(today), get_settings())
    print_streak(summary)
    return summary


def do_heatmap(
    db: Database,
    module: ActivityModule,
    weeks: int | None = None,
    today: str | None = None,
) -> dict:
    """Show the heatmap for one module. Returns the grid as a dict."""
    if weeks is not None and weeks < 1:
        raise ValueError(f"weeks must be >= 1, got {weeks}")
    heatmap = build_module_heatmap(db, module, _resolve_today(today), get_settings(), weeks)
    print_heatmap(heatmap, module.value)
    return heatmap.to_dict()


def do_import(db: Database, module: ActivityModule, path: Path) -> int:
    """Load a JSON list of {day, count, hasActivity} records into the store.

    The whole file is validated before anything is written.
    """
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON list of daily records")
    history = signals_from_records(records)
    for signal in history:
        db.set_daily_count(module, signal.day, signal.count, has_activity=signal.has_activity)
    logger.info("Imported %d days into %s from %s", len(history), module.value, path)
    print_import_result(module.value, len(history))
    return len(history)


def do_config(args: argparse.Namespace, config_path: Path | None = None) -> dict:
    """Handle `config show|set|buckets`. Returns the resulting settings view."""
    sub = getattr(args, "config_command", None)
    if sub == "set":
        set_setting(args.key, args.value, config_path)
    elif sub == "buckets":
        set_heatmap_thresholds(args.module, args.thresholds, config_path)

    settings = get_settings(config_path)
    view: dict = {
        "heatmap_weeks": settings.heatmap_weeks,
        "motivation_max_gap": settings.motivation_max_gap,
        "at_risk_after_days": settings.at_risk_after_days,
    }
    for module in ActivityModule:
        view[f"buckets.{module.value}"] = list(settings.buckets_for(module).thresholds)
    print_config(view)
    return view


if __name__ == "__main__":
    main()
