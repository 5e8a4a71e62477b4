"""Source definitions and environment settings for a reassignment run."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Tuple


logger = logging.getLogger(__name__)

DATA_DIR_ENV = "TEAMBALANCE_DATA_DIR"
LOG_LEVEL_ENV = "TEAMBALANCE_LOG_LEVEL"

_DATA_DIR_DEFAULT = "data"

BASE_METRIC_FIELDS: Tuple[str, ...] = (
    "current_total_points",
    "historical_events_participated",
    "historical_messages_sent",
    "days_active_last_30",
)

DERIVED_METRIC_FIELDS: Tuple[str, ...] = (
    "total_actions",
    "unique_actions",
    "total_events",
    "avg_event_performance",
    "total_messages",
    "unique_recipients",
)

# Order matters: scores are summed in this order.
METRIC_FIELDS: Tuple[str, ...] = BASE_METRIC_FIELDS + DERIVED_METRIC_FIELDS


@dataclass(frozen=True)
class SourceSpec:
    key: str
    label: str
    filename: str
    id_column: str
    value_columns: Tuple[str, ...]
    primary: bool = False


_SOURCES: Dict[str, SourceSpec] = {
    "players": SourceSpec(
        key="players",
        label="player profile sheet",
        filename="level_a_players.xlsx",
        id_column="player_id",
        value_columns=BASE_METRIC_FIELDS,
        primary=True,
    ),
    "actions": SourceSpec(
        key="actions",
        label="action log",
        filename="level_b_actions.xlsx",
        id_column="player_id",
        value_columns=("action_type",),
    ),
    "events": SourceSpec(
        key="events",
        label="event log",
        filename="level_b_events.xlsx",
        id_column="player_id",
        value_columns=("performance_score",),
    ),
    "messages": SourceSpec(
        key="messages",
        label="message log",
        filename="level_b_messages.xlsx",
        id_column="player_id",
        value_columns=("recipient_id",),
    ),
}


def iter_sources() -> Iterable[SourceSpec]:
    """Return the configured sources, primary first."""

    return _SOURCES.values()


def get_source(key: str) -> SourceSpec:
    """Fetch a source definition by key, raising KeyError if missing."""

    normalized = key.strip().lower()
    if normalized not in _SOURCES:
        raise KeyError(f"No data source configured for key={key!r}")
    return _SOURCES[normalized]


def _env_path(name: str, default: str) -> Path:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return Path(default)
    return Path(raw.strip()).expanduser()


def _env_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    text = raw.strip().upper()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text)
    if not isinstance(level, int):
        logger.warning("Invalid log level for %s: %s; using default %s", name, raw, logging.getLevelName(default))
        return default
    return level


def default_data_dir() -> Path:
    """Data directory from TEAMBALANCE_DATA_DIR, falling back to ./data."""

    return _env_path(DATA_DIR_ENV, _DATA_DIR_DEFAULT)


def log_level(verbose: bool = False) -> int:
    default = logging.INFO if verbose else logging.WARNING
    return _env_level(LOG_LEVEL_ENV, default)
