from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, Iterable, Mapping, Sequence

import pytest

from teambalance.ingest import SourcePaths


PLAYER_COLUMNS = (
    "player_id",
    "current_total_points",
    "historical_events_participated",
    "historical_messages_sent",
    "days_active_last_30",
)


def write_csv(path: Path, columns: Sequence[str], rows: Iterable[Mapping[str, object]]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(columns))
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path


@pytest.fixture
def write_sources(tmp_path: Path) -> Callable[..., SourcePaths]:
    """Write the four sources as CSV files under ``tmp_path``."""

    def _write(
        players: Iterable[Mapping[str, object]],
        actions: Iterable[Mapping[str, object]] = (),
        events: Iterable[Mapping[str, object]] = (),
        messages: Iterable[Mapping[str, object]] = (),
    ) -> SourcePaths:
        return SourcePaths(
            players=write_csv(tmp_path / "players.csv", PLAYER_COLUMNS, players),
            actions=write_csv(tmp_path / "actions.csv", ("player_id", "action_type"), actions),
            events=write_csv(tmp_path / "events.csv", ("player_id", "performance_score"), events),
            messages=write_csv(tmp_path / "messages.csv", ("player_id", "recipient_id"), messages),
        )

    return _write
