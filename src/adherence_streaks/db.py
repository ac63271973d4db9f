"""SQLite log store for adherence-streaks.

Holds the raw per-day counts for each module and the persisted personal
best. The streak engine never touches this; callers read a history from here,
compute, and write a raised best back.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from adherence_streaks.daykeys import parse_day_key
from adherence_streaks.signals import ActivityModule, DailyActivitySignal
from adherence_streaks.streaks import StreakState

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".adherence-streaks" / "data.db"


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.init_db()

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS daily_signals (
                module TEXT NOT NULL,
                day TEXT NOT NULL,
                count INTEGER NOT NULL DEFAULT 0,
                has_activity BOOLEAN NOT NULL DEFAULT 0,
                PRIMARY KEY (module, day)
            );

            CREATE TABLE IF NOT EXISTS streak_state (
                module TEXT PRIMARY KEY,
                best_days INTEGER NOT NULL DEFAULT 0,
                best_end_day TEXT,
                current_days INTEGER NOT NULL DEFAULT 0,
                last_day_key TEXT,
                run_start_day TEXT,
                best_before_run INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT
            );
        """)
        self.conn.commit()

    def record_activity(self, module: ActivityModule, day: str, count: int = 1) -> int:
        """Add count to a day's total. Returns the new total."""
        parse_day_key(day)
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        existing = self.get_daily_count(module, day)
        total = (existing or 0) + count
        self.set_daily_count(module, day, total)
        return total

    def set_daily_count(
        self,
        module: ActivityModule,
        day: str,
        count: int,
        has_activity: bool | None = None,
    ) -> None:
        """Insert or overwrite one day. has_activity defaults to count > 0."""
        parse_day_key(day)
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        active = count > 0 if has_activity is None else has_activity
        self.conn.execute(
            "INSERT INTO daily_signals (module, day, count, has_activity) VALUES (?, ?, ?, ?) "
            "ON CONFLICT(module, day) DO UPDATE SET "
            "count = excluded.count, has_activity = excluded.has_activity",
            (module.value, day, count, int(active)),
        )
        self.conn.commit()

    def get_daily_count(self, module: ActivityModule, day: str) -> int | None:
        """Get the stored count for one day, or None if no row exists."""
        row = self.conn.execute(
            "SELECT count FROM daily_signals WHERE module = ? AND day = ?",
            (module.value, day),
        ).fetchone()
        return row["count"] if row else None

    def get_history(self, module: ActivityModule) -> list[DailyActivitySignal]:
        """Return every stored day for a module, ascending."""
        rows = self.conn.execute(
            "SELECT day, count, has_activity FROM daily_signals WHERE module = ? ORDER BY day",
            (module.value,),
        ).fetchall()
        return [
            DailyActivitySignal(day=row["day"], has_activity=bool(row["has_activity"]), count=row["count"])
            for row in rows
        ]

    def get_counts(self, module: ActivityModule, start: str, end: str) -> dict[str, int]:
        """Get day -> count for a date range (inclusive)."""
        rows = self.conn.execute(
            "SELECT day, count FROM daily_signals WHERE module = ? AND day >= ? AND day <= ? "
            "ORDER BY day",
            (module.value, start, end),
        ).fetchall()
        return {row["day"]: row["count"] for row in rows}

    def first_day(self, module: ActivityModule) -> str | None:
        """Earliest stored day for a module."""
        row = self.conn.execute(
            "SELECT MIN(day) AS first FROM daily_signals WHERE module = ?",
            (module.value,),
        ).fetchone()
        return row["first"] if row else None

    def modules_with_data(self) -> list[ActivityModule]:
        """Modules that have at least one stored day, in enum order."""
        rows = self.conn.execute("SELECT DISTINCT module FROM daily_signals").fetchall()
        stored = {row["module"] for row in rows}
        return [m for m in ActivityModule if m.value in stored]

    def get_streak_state(self, module: ActivityModule) -> dict | None:
        """Get the persisted streak row for a module."""
        row = self.conn.execute(
            "SELECT * FROM streak_state WHERE module = ?", (module.value,)
        ).fetchone()
        return dict(row) if row else None

    def save_streak_state(
        self,
        module: ActivityModule,
        state: StreakState,
        best_before_run: int = 0,
    ) -> None:
        """Persist a computed state. A stored best_days is never lowered.

        best_before_run is the best as it stood when the current run began;
        it is stored alongside the run's first day.
        """
        existing = self.get_streak_state(module)
        best_days, best_end_day = state.best_days, state.best_end_day
        if existing and existing["best_days"] > best_days:
            logger.debug(
                "Keeping stored best %d for %s over computed %d",
                existing["best_days"], module.value, best_days,
            )
            best_days, best_end_day = existing["best_days"], existing["best_end_day"]
        self.conn.execute(
            "INSERT INTO streak_state "
            "(module, best_days, best_end_day, current_days, last_day_key, "
            "run_start_day, best_before_run, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(module) DO UPDATE SET best_days = excluded.best_days, "
            "best_end_day = excluded.best_end_day, current_days = excluded.current_days, "
            "last_day_key = excluded.last_day_key, run_start_day = excluded.run_start_day, "
            "best_before_run = excluded.best_before_run, updated_at = excluded.updated_at",
            (
                module.value,
                best_days,
                best_end_day,
                state.current_days,
                state.last_day_key,
                state.current_start_day,
                best_before_run,
                datetime.now(tz=timezone.utc).isoformat(),
            ),
        )
        self.conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
