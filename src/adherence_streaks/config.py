"""Configuration file management for adherence-streaks.

Reads and writes ~/.adherence-streaks/config.json for presentation tuning
values: heatmap window and score thresholds, the "at risk" threshold and the
motivation gap.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from adherence_streaks.heatmap import DEFAULT_BUCKETS, DEFAULT_WEEKS, ScoreBuckets
from adherence_streaks.signals import ActivityModule, parse_module

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH: Path = Path.home() / ".adherence-streaks" / "config.json"

DEFAULT_MOTIVATION_MAX_GAP = 2
DEFAULT_AT_RISK_AFTER_DAYS = 1

SCALAR_SETTINGS: dict[str, int] = {
    "heatmap_weeks": DEFAULT_WEEKS,
    "motivation_max_gap": DEFAULT_MOTIVATION_MAX_GAP,
    "at_risk_after_days": DEFAULT_AT_RISK_AFTER_DAYS,
}

_MINIMUMS: dict[str, int] = {
    "heatmap_weeks": 1,
    "motivation_max_gap": 0,
    "at_risk_after_days": 0,
}


@dataclass(frozen=True)
class Settings:
    heatmap_weeks: int = DEFAULT_WEEKS
    motivation_max_gap: int = DEFAULT_MOTIVATION_MAX_GAP
    at_risk_after_days: int = DEFAULT_AT_RISK_AFTER_DAYS
    heatmap_buckets: dict[ActivityModule, ScoreBuckets] = field(default_factory=dict)

    def buckets_for(self, module: ActivityModule) -> ScoreBuckets:
        return self.heatmap_buckets.get(module, DEFAULT_BUCKETS)


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return {}
    return data


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def _scalar(config: dict, key: str) -> int:
    default = SCALAR_SETTINGS[key]
    raw = config.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < _MINIMUMS[key]:
        logger.warning("Invalid %s=%r in config, using %d", key, raw, default)
        return default
    return raw


def _buckets(config: dict) -> dict[ActivityModule, ScoreBuckets]:
    raw = config.get("heatmap_thresholds", {})
    if not isinstance(raw, dict):
        logger.warning("Invalid heatmap_thresholds in config, using defaults")
        return {}
    result: dict[ActivityModule, ScoreBuckets] = {}
    for name, thresholds in raw.items():
        try:
            module = parse_module(name)
            result[module] = ScoreBuckets(tuple(thresholds))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping heatmap thresholds for %r: %s", name, exc)
    return result


def get_settings(config_path: Path | None = None) -> Settings:
    """Read tuning values, falling back to defaults for anything invalid."""
    config = load_config(config_path)
    return Settings(
        heatmap_weeks=_scalar(config, "heatmap_weeks"),
        motivation_max_gap=_scalar(config, "motivation_max_gap"),
        at_risk_after_days=_scalar(config, "at_risk_after_days"),
        heatmap_buckets=_buckets(config),
    )


def set_setting(key: str, value: int, config_path: Path | None = None) -> None:
    """Persist one scalar setting. Raises ValueError for unknown keys or values."""
    if key not in SCALAR_SETTINGS:
        known = ", ".join(sorted(SCALAR_SETTINGS))
        raise ValueError(f"Unknown setting {key!r}. Must be one of: {known}")
    if isinstance(value, bool) or not isinstance(value, int) or value < _MINIMUMS[key]:
        raise ValueError(f"{key} must be an int >= {_MINIMUMS[key]}, got {value!r}")
    config = load_config(config_path)
    config[key] = value
    save_config(config, config_path)


def set_heatmap_thresholds(
    module: str | ActivityModule,
    thresholds: tuple[int, int, int] | list[int],
    config_path: Path | None = None,
) -> ScoreBuckets:
    """Validate and persist heatmap thresholds for one module."""
    resolved = parse_module(module)
    buckets = ScoreBuckets(tuple(thresholds))
    config = load_config(config_path)
    per_module = config.get("heatmap_thresholds")
    if not isinstance(per_module, dict):
        per_module = {}
    per_module[resolved.value] = list(buckets.thresholds)
    config["heatmap_thresholds"] = per_module
    save_config(config, config_path)
    return buckets
