"""Rich terminal display for adherence-streaks."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from adherence_streaks.daykeys import parse_day_key
from adherence_streaks.heatmap import Heatmap

console = Console()

# Accent colors per module, as valid Rich color names
_MODULE_COLORS: dict[str, str] = {
    "login": "medium_purple1",
    "food": "salmon1",
    "medication": "deep_sky_blue1",
    "exercise": "green3",
    "water": "cyan",
    "weight": "gold1",
}

# Heatmap cell colors by score 0-3
_SCORE_COLORS: list[str] = ["grey23", "dark_green", "green3", "bright_green"]

_FILLED_DOT = "●"
_EMPTY_DOT = "○"
_CELL = "■"


def _module_color(module: str) -> str:
    return _MODULE_COLORS.get(module, "white")


def week_dots(week: list[bool]) -> str:
    """Render a 7-day indicator as dots, oldest first: '○○○○●●●'."""
    return "".join(_FILLED_DOT if in_run else _EMPTY_DOT for in_run in week)


def _days_text(n: int) -> str:
    return "day streak" if n == 1 else "days streak"


def _summary_lines(summary: dict) -> list[str]:
    color = _module_color(summary.get("module", ""))
    current = summary.get("current_days", 0)
    lines: list[str] = []
    lines.append(
        f"  [bold {color}]{summary.get('module', '').title()}[/]  "
        f"{summary.get('emoji', '')} [bold]{current}[/] {_days_text(current)}"
    )
    status = summary.get("status", "broken")
    status_text = "[green]active[/]" if status == "active" else "[grey50]broken[/]"
    lines.append(f"  Status: {status_text}  |  {summary.get('pr_text', '')}")
    if summary.get("motivation"):
        lines.append(f"  [{color}]{summary['motivation']}[/]")
    if summary.get("at_risk"):
        lines.append("  [yellow]⚠ Log today to keep your streak![/]")
    lines.append(f"  Last 7 days: [{color}]{week_dots(summary.get('week', [False] * 7))}[/]")
    return lines


def print_dashboard(summaries: list[dict]) -> None:
    """Print one panel with a section per module."""
    lines: list[str] = [""]
    for i, summary in enumerate(summaries):
        if i:
            lines.append("")
        lines.extend(_summary_lines(summary))
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]STREAKS[/]",
        box=box.ROUNDED,
        border_style="medium_purple1",
        width=56,
    )
    console.print(panel)


def print_streak(summary: dict) -> None:
    """Print a detailed streak table for one module."""
    color = _module_color(summary.get("module", ""))
    table = Table(
        title=f"{summary.get('module', '').title()} Streak",
        box=box.ROUNDED,
        border_style=color,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Current Streak", f"{summary.get('current_days', 0)} days")
    table.add_row("Best Streak", f"{summary.get('best_days', 0)} days")
    table.add_row("Status", summary.get("status", "broken"))
    table.add_row("Last Active Day", summary.get("last_day_key") or "never")
    table.add_row("Run Started", summary.get("current_start_day") or "-")
    table.add_row("Best Run Ended", summary.get("best_end_day") or "-")
    table.add_row("Tracking Since", summary.get("first_day") or "-")
    table.add_row("Logged Today", "yes" if summary.get("today_logged") else "no")
    table.add_row("At Risk", "yes" if summary.get("at_risk") else "no")
    if summary.get("tier"):
        table.add_row("Tier", f"{summary.get('emoji', '')} {summary['tier']}")
    table.add_row("Record", summary.get("pr_text", ""))

    table.add_section()
    days = summary.get("week_days", [])
    week = summary.get("week", [False] * 7)
    for day, in_run in zip(days, week):
        weekday = parse_day_key(day).strftime("%a")
        table.add_row(f"  {weekday} {day}", f"[{color}]{_FILLED_DOT}[/]" if in_run else _EMPTY_DOT)

    console.print(table)


def print_heatmap(heatmap: Heatmap, module: str) -> None:
    """Print a heatmap grid, one row per week, oldest week at the top."""
    table = Table(
        title=f"{module.title()} Heatmap ({heatmap.start} to {heatmap.end})",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Week of", style="grey70")
    first_week = heatmap.weeks[0] if heatmap.weeks else ()
    for cell in first_week:
        table.add_column(parse_day_key(cell.day).strftime("%a"), justify="center", width=3)

    for week in heatmap.weeks:
        row = [week[0].day]
        for cell in week:
            row.append(f"[{_SCORE_COLORS[cell.score]}]{_CELL}[/]")
        table.add_row(*row)

    console.print(table)
    legend = "  ".join(
        f"[{color}]{_CELL}[/] {score}" for score, color in enumerate(_SCORE_COLORS)
    )
    console.print(f"  Less {legend} More   (max {heatmap.max_count}/day)")


def print_log_result(module: str, day: str, total: int) -> None:
    """Print confirmation after logging activity."""
    color = _module_color(module)
    console.print(f"[{color}]✅ {module.title()}[/] logged for {day} (total: {total})")


def print_import_result(module: str, imported: int) -> None:
    """Print import results summary."""
    panel = Panel(
        f"\n  Imported {imported} days into [bold]{module}[/].\n",
        title="[bold]Import Complete[/]",
        box=box.ROUNDED,
        border_style="green",
        width=50,
    )
    console.print(panel)


def print_config(settings: dict) -> None:
    """Print current configuration values as a table."""
    table = Table(title="Settings", box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Setting", style="bold")
    table.add_column("Value", justify="right")
    for key, value in settings.items():
        table.add_row(key, str(value))
    console.print(table)


def print_no_data_message() -> None:
    """Print message when no data is available."""
    panel = Panel(
        "\n  No activity logged yet. Run [bold]adherence-streaks log <module>[/] first.\n",
        title="[bold]STREAKS[/]",
        box=box.ROUNDED,
        border_style="grey50",
        width=56,
    )
    console.print(panel)


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[bold red]Error:[/] {escape(message)}")
