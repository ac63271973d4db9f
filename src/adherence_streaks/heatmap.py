"""Heatmap aggregation: quantized daily scores over a fixed window of weeks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from adherence_streaks.daykeys import day_range, parse_day_key
from adherence_streaks.errors import InvalidHistory
from adherence_streaks.signals import DailyActivitySignal, validate_history

DEFAULT_WEEKS = 5
MAX_SCORE = 3


@dataclass(frozen=True)
class ScoreBuckets:
    """Count -> score mapping.

    thresholds holds the minimum count for scores 1, 2 and 3. The default
    (1, 2, 3) maps 0 -> 0, 1 -> 1, 2 -> 2 and anything from 3 up to 3.
    """

    thresholds: tuple[int, int, int] = (1, 2, 3)

    def __post_init__(self) -> None:
        values = tuple(self.thresholds)
        if len(values) != MAX_SCORE:
            raise ValueError(f"Expected {MAX_SCORE} thresholds, got {len(values)}")
        if any(isinstance(v, bool) or not isinstance(v, int) for v in values):
            raise ValueError(f"Thresholds must be ints: {values!r}")
        if values[0] < 1:
            raise ValueError(f"Lowest threshold must be >= 1, got {values[0]}")
        if any(b <= a for a, b in zip(values, values[1:])):
            raise ValueError(f"Thresholds must be strictly increasing: {values!r}")
        object.__setattr__(self, "thresholds", values)

    def score(self, count: int) -> int:
        if count < 0:
            raise InvalidHistory(f"Negative count: {count}")
        return sum(1 for t in self.thresholds if count >= t)


DEFAULT_BUCKETS = ScoreBuckets()


@dataclass(frozen=True)
class HeatmapCell:
    day: str
    score: int
    count: int = 0


@dataclass(frozen=True)
class Heatmap:
    weeks: tuple[tuple[HeatmapCell, ...], ...]
    start: str
    end: str
    max_count: int

    @property
    def cells(self) -> list[HeatmapCell]:
        """All cells, oldest first."""
        return [cell for week in self.weeks for cell in week]

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "max_count": self.max_count,
            "weeks": [
                [{"day": c.day, "score": c.score, "count": c.count} for c in week]
                for week in self.weeks
            ],
        }


def counts_from_signals(history: Iterable[DailyActivitySignal]) -> dict[str, int]:
    """Map each day in a validated history to its count."""
    return {s.day: s.count for s in validate_history(history)}


def build_heatmap(
    today: str,
    counts: Mapping[str, int],
    weeks: int = DEFAULT_WEEKS,
    buckets: ScoreBuckets = DEFAULT_BUCKETS,
) -> Heatmap:
    """Build a weeks x 7 grid of scored days ending at today.

    Days absent from counts score 0; that covers days before an account
    existed. The grid always has weeks * 7 cells.
    """
    if isinstance(weeks, bool) or not isinstance(weeks, int) or weeks < 1:
        raise ValueError(f"weeks must be a positive int, got {weeks!r}")
    parse_day_key(today)
    for day, count in counts.items():
        parse_day_key(day)
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidHistory(f"Count for {day} must be an int, got {count!r}")
        if count < 0:
            raise InvalidHistory(f"Negative count for {day}: {count}")

    days = day_range(today, weeks * 7)
    cells = [
        HeatmapCell(day=d, score=buckets.score(counts.get(d, 0)), count=counts.get(d, 0))
        for d in days
    ]
    grid = tuple(tuple(cells[w * 7:(w + 1) * 7]) for w in range(weeks))
    return Heatmap(
        weeks=grid,
        start=days[0],
        end=days[-1],
        max_count=max((c.count for c in cells), default=0),
    )
