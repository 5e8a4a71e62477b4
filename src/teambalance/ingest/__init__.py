"""Input adapters that turn raw activity exports into player records."""

from .players import (
    ActionAggregate,
    EventAggregate,
    LoadReport,
    MessageAggregate,
    SourcePaths,
    aggregate_actions,
    aggregate_events,
    aggregate_messages,
    build_base_registry,
    load_players,
    merge_aggregates,
)
from .tables import SourceLoadError, read_table

__all__ = [
    "ActionAggregate",
    "EventAggregate",
    "LoadReport",
    "MessageAggregate",
    "SourceLoadError",
    "SourcePaths",
    "aggregate_actions",
    "aggregate_events",
    "aggregate_messages",
    "build_base_registry",
    "load_players",
    "merge_aggregates",
    "read_table",
]
