"""MCP server for adherence-streaks.

Exposes streak and heatmap summaries as MCP tools so an assistant can query
them mid-conversation.
Run via: python3 -m adherence_streaks.mcp_server
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from adherence_streaks.config import get_settings
from adherence_streaks.daykeys import parse_day_key, today_key
from adherence_streaks.errors import StreakEngineError
from adherence_streaks.signals import parse_module

mcp = FastMCP(name="adherence-streaks")


def _get_db():
    from adherence_streaks.db import Database
    return Database()


def _resolve_today(today: str) -> str:
    if not today:
        return today_key()
    parse_day_key(today)
    return today


@mcp.tool()
def get_streak(module: str, today: str = "") -> dict[str, Any]:
    """Get the streak for one module: current and best days, status, last 7 days.

    module: login, food, medication, exercise, water or weight.
    today: optional YYYY-MM-DD override; defaults to the local day.
    """
    try:
        resolved = parse_module(module)
        day = _resolve_today(today)
    except (StreakEngineError, ValueError) as exc:
        return {"error": str(exc)}
    db = _get_db()
    try:
        from adherence_streaks.summary import build_module_summary
        return build_module_summary(db, resolved, day, get_settings())
    except StreakEngineError as exc:
        return {"error": str(exc)}
    finally:
        db.close()


@mcp.tool()
def get_heatmap(module: str, weeks: int = 0, today: str = "") -> dict[str, Any]:
    """Get the activity heatmap for one module as weeks of scored days (0-3).

    weeks: number of weeks; 0 uses the configured default.
    """
    if weeks < 0:
        return {"error": f"weeks must be >= 0, got {weeks}"}
    try:
        resolved = parse_module(module)
        day = _resolve_today(today)
    except (StreakEngineError, ValueError) as exc:
        return {"error": str(exc)}
    db = _get_db()
    try:
        from adherence_streaks.summary import build_module_heatmap
        heatmap = build_module_heatmap(db, resolved, day, get_settings(), weeks or None)
        result = heatmap.to_dict()
        result["module"] = resolved.value
        return result
    except StreakEngineError as exc:
        return {"error": str(exc)}
    finally:
        db.close()


@mcp.tool()
def get_dashboard(today: str = "") -> dict[str, Any]:
    """Get streak summaries for every module with logged activity."""
    try:
        day = _resolve_today(today)
    except StreakEngineError as exc:
        return {"error": str(exc)}
    db = _get_db()
    try:
        from adherence_streaks.summary import build_dashboard
        summaries = build_dashboard(db, day, get_settings())
        if not summaries:
            return {"error": "No activity logged yet. Run adherence-streaks log <module> first."}
        return {"today": day, "modules": summaries}
    except StreakEngineError as exc:
        return {"error": str(exc)}
    finally:
        db.close()


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
