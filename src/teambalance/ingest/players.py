"""Build the player registry from the primary sheet and the activity logs."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from teambalance.config import BASE_METRIC_FIELDS, SourceSpec, get_source
from teambalance.ingest.tables import Row, SourceLoadError, is_blank, read_table
from teambalance.models import PlayerRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourcePaths:
    players: Path
    actions: Path
    events: Path
    messages: Path

    @classmethod
    def from_data_dir(cls, data_dir: Path) -> "SourcePaths":
        base = Path(data_dir)
        return cls(
            players=base / get_source("players").filename,
            actions=base / get_source("actions").filename,
            events=base / get_source("events").filename,
            messages=base / get_source("messages").filename,
        )


@dataclass(frozen=True)
class ActionAggregate:
    total: int
    unique: int


@dataclass(frozen=True)
class EventAggregate:
    total: int
    score_sum: float

    @property
    def average(self) -> float:
        return self.score_sum / self.total if self.total else 0.0


@dataclass(frozen=True)
class MessageAggregate:
    total: int
    unique_recipients: int


@dataclass(frozen=True)
class LoadReport:
    total_players: int
    duplicate_player_ids: List[int] = field(default_factory=list)
    rows_read: Dict[str, int] = field(default_factory=dict)
    orphan_rows: Dict[str, int] = field(default_factory=dict)


def _parse_player_id(value: Any, *, spec: SourceSpec, path: Path, line: int) -> int:
    if is_blank(value):
        raise SourceLoadError(spec.label, path, f"row {line} has no {spec.id_column}")
    if isinstance(value, bool):
        raise SourceLoadError(spec.label, path, f"row {line} has non-integer {spec.id_column} {value!r}")
    text = value.strip() if isinstance(value, str) else value
    try:
        number = float(text)
    except (TypeError, ValueError):
        raise SourceLoadError(
            spec.label, path, f"row {line} has non-integer {spec.id_column} {value!r}"
        ) from None
    if not math.isfinite(number) or not number.is_integer():
        raise SourceLoadError(spec.label, path, f"row {line} has non-integer {spec.id_column} {value!r}")
    return int(number)


def _parse_number(value: Any, *, column: str, spec: SourceSpec, path: Path, line: int) -> float:
    if is_blank(value):
        return 0.0
    if isinstance(value, bool):
        raise SourceLoadError(spec.label, path, f"row {line} column {column} is not numeric: {value!r}")
    text = value.strip() if isinstance(value, str) else value
    try:
        number = float(text)
    except (TypeError, ValueError):
        raise SourceLoadError(
            spec.label, path, f"row {line} column {column} is not numeric: {value!r}"
        ) from None
    if not math.isfinite(number):
        raise SourceLoadError(spec.label, path, f"row {line} column {column} is not finite: {value!r}")
    return number


def _category_key(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _read_source(key: str, path: Path) -> Tuple[SourceSpec, List[Row]]:
    spec = get_source(key)
    rows = read_table(path, source=spec.label, required_columns=(spec.id_column,))
    if rows:
        absent = [column for column in spec.value_columns if column not in rows[0]]
        if absent:
            logger.warning("%s %s has no %s column; treating values as missing", spec.label, path, absent)
    return spec, rows


def _iter_keyed(rows: Sequence[Row], spec: SourceSpec, path: Path) -> Iterator[Tuple[int, int, Row]]:
    # Line numbers count the header row, matching what a spreadsheet shows.
    for line, row in enumerate(rows, start=2):
        player_id = _parse_player_id(row.get(spec.id_column), spec=spec, path=path, line=line)
        yield player_id, line, row


def build_base_registry(
    rows: Sequence[Row],
    *,
    path: Path,
) -> Tuple[Dict[int, PlayerRecord], List[int]]:
    """Create one record per primary row; later duplicates overwrite earlier ones."""

    spec = get_source("players")
    registry: Dict[int, PlayerRecord] = {}
    duplicates: List[int] = []
    for player_id, line, row in _iter_keyed(rows, spec, path):
        metrics = {
            column: _parse_number(row.get(column), column=column, spec=spec, path=path, line=line)
            for column in BASE_METRIC_FIELDS
        }
        if player_id in registry:
            duplicates.append(player_id)
            logger.warning("Duplicate player_id %s in %s (row %s); keeping the later row", player_id, path, line)
        registry[player_id] = PlayerRecord(player_id=player_id, **metrics)
    return registry, duplicates


def aggregate_actions(rows: Sequence[Row], *, path: Path) -> Dict[int, ActionAggregate]:
    spec = get_source("actions")
    totals: Dict[int, int] = {}
    kinds: Dict[int, Set[str]] = {}
    for player_id, _, row in _iter_keyed(rows, spec, path):
        totals[player_id] = totals.get(player_id, 0) + 1
        bucket = kinds.setdefault(player_id, set())
        action_type = _category_key(row.get("action_type"))
        if action_type is not None:
            bucket.add(action_type)
    return {
        player_id: ActionAggregate(total=total, unique=len(kinds[player_id]))
        for player_id, total in totals.items()
    }


def aggregate_events(rows: Sequence[Row], *, path: Path) -> Dict[int, EventAggregate]:
    spec = get_source("events")
    totals: Dict[int, int] = {}
    score_sums: Dict[int, float] = {}
    for player_id, line, row in _iter_keyed(rows, spec, path):
        score = _parse_number(row.get("performance_score"), column="performance_score", spec=spec, path=path, line=line)
        totals[player_id] = totals.get(player_id, 0) + 1
        score_sums[player_id] = score_sums.get(player_id, 0.0) + score
    return {
        player_id: EventAggregate(total=total, score_sum=score_sums[player_id])
        for player_id, total in totals.items()
    }


def aggregate_messages(rows: Sequence[Row], *, path: Path) -> Dict[int, MessageAggregate]:
    spec = get_source("messages")
    totals: Dict[int, int] = {}
    recipients: Dict[int, Set[str]] = {}
    for player_id, _, row in _iter_keyed(rows, spec, path):
        totals[player_id] = totals.get(player_id, 0) + 1
        bucket = recipients.setdefault(player_id, set())
        recipient = _category_key(row.get("recipient_id"))
        if recipient is not None:
            bucket.add(recipient)
    return {
        player_id: MessageAggregate(total=total, unique_recipients=len(recipients[player_id]))
        for player_id, total in totals.items()
    }


def merge_aggregates(
    base: Mapping[int, PlayerRecord],
    *,
    actions: Mapping[int, ActionAggregate],
    events: Mapping[int, EventAggregate],
    messages: Mapping[int, MessageAggregate],
) -> Dict[int, PlayerRecord]:
    """Left-join aggregates onto ``base``; players without activity keep zeros."""

    merged: Dict[int, PlayerRecord] = {}
    for player_id, record in base.items():
        update: Dict[str, Any] = {}
        action = actions.get(player_id)
        if action is not None:
            update["total_actions"] = action.total
            update["unique_actions"] = action.unique
        event = events.get(player_id)
        if event is not None:
            update["total_events"] = event.total
            update["avg_event_performance"] = event.average
        message = messages.get(player_id)
        if message is not None:
            update["total_messages"] = message.total
            update["unique_recipients"] = message.unique_recipients
        merged[player_id] = record.model_copy(update=update) if update else record
    return merged


def _count_orphans(base: Mapping[int, PlayerRecord], rows: Sequence[Row], spec: SourceSpec, path: Path) -> int:
    return sum(1 for player_id, _, _ in _iter_keyed(rows, spec, path) if player_id not in base)


def load_players(sources: SourcePaths) -> Tuple[Dict[int, PlayerRecord], LoadReport]:
    """Load all four sources and return the merged registry in primary row order."""

    _, player_rows = _read_source("players", sources.players)
    base, duplicates = build_base_registry(player_rows, path=sources.players)

    action_spec, action_rows = _read_source("actions", sources.actions)
    event_spec, event_rows = _read_source("events", sources.events)
    message_spec, message_rows = _read_source("messages", sources.messages)

    registry = merge_aggregates(
        base,
        actions=aggregate_actions(action_rows, path=sources.actions),
        events=aggregate_events(event_rows, path=sources.events),
        messages=aggregate_messages(message_rows, path=sources.messages),
    )

    orphan_rows = {
        "actions": _count_orphans(base, action_rows, action_spec, sources.actions),
        "events": _count_orphans(base, event_rows, event_spec, sources.events),
        "messages": _count_orphans(base, message_rows, message_spec, sources.messages),
    }
    for key, count in orphan_rows.items():
        if count:
            logger.info("Dropped %s %s rows for players missing from the profile sheet", count, key)

    report = LoadReport(
        total_players=len(registry),
        duplicate_player_ids=duplicates,
        rows_read={
            "players": len(player_rows),
            "actions": len(action_rows),
            "events": len(event_rows),
            "messages": len(message_rows),
        },
        orphan_rows=orphan_rows,
    )
    logger.info(
        "Loaded %s players (%s action, %s event, %s message rows)",
        report.total_players,
        len(action_rows),
        len(event_rows),
        len(message_rows),
    )
    return registry, report
