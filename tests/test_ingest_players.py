from pathlib import Path

import pytest

from teambalance.ingest import (
    SourceLoadError,
    SourcePaths,
    aggregate_events,
    build_base_registry,
    load_players,
    merge_aggregates,
)
from teambalance.ingest.players import ActionAggregate


def _player(player_id, points="0", events="0", messages="0", days="0"):
    return {
        "player_id": player_id,
        "current_total_points": points,
        "historical_events_participated": events,
        "historical_messages_sent": messages,
        "days_active_last_30": days,
    }


def test_load_players_merges_all_sources(write_sources):
    sources = write_sources(
        players=[_player(1, points="120", days="14"), _player(2, points="80")],
        actions=[
            {"player_id": 1, "action_type": "login"},
            {"player_id": 1, "action_type": "trade"},
            {"player_id": 1, "action_type": "login"},
        ],
        events=[
            {"player_id": 1, "performance_score": "8"},
            {"player_id": 1, "performance_score": "6"},
        ],
        messages=[
            {"player_id": 2, "recipient_id": 1},
            {"player_id": 2, "recipient_id": 1},
            {"player_id": 2, "recipient_id": 3},
        ],
    )

    registry, report = load_players(sources)

    first = registry[1]
    assert first.current_total_points == 120
    assert first.days_active_last_30 == 14
    assert first.total_actions == 3
    assert first.unique_actions == 2
    assert first.total_events == 2
    assert first.avg_event_performance == pytest.approx(7.0)
    assert first.total_messages == 0

    second = registry[2]
    assert second.total_actions == 0
    assert second.total_events == 0
    assert second.avg_event_performance == 0.0
    assert second.total_messages == 3
    assert second.unique_recipients == 2

    assert report.total_players == 2
    assert report.rows_read == {"players": 2, "actions": 3, "events": 2, "messages": 3}


def test_missing_performance_score_counts_as_zero(write_sources):
    sources = write_sources(
        players=[_player(1)],
        events=[
            {"player_id": 1, "performance_score": "9"},
            {"player_id": 1, "performance_score": ""},
            {"player_id": 1, "performance_score": "3"},
        ],
    )

    registry, _ = load_players(sources)

    assert registry[1].total_events == 3
    assert registry[1].avg_event_performance == pytest.approx(4.0)


def test_missing_base_fields_default_to_zero(write_sources):
    sources = write_sources(players=[{"player_id": 5, "current_total_points": "42"}])

    registry, _ = load_players(sources)

    record = registry[5]
    assert record.current_total_points == 42
    assert record.historical_events_participated == 0
    assert record.days_active_last_30 == 0


def test_orphan_rows_are_dropped(write_sources):
    sources = write_sources(
        players=[_player(1)],
        actions=[{"player_id": 1, "action_type": "login"}, {"player_id": 99, "action_type": "login"}],
        messages=[{"player_id": 42, "recipient_id": 1}],
    )

    registry, report = load_players(sources)

    assert list(registry) == [1]
    assert registry[1].total_actions == 1
    assert registry[1].total_messages == 0
    assert report.orphan_rows == {"actions": 1, "events": 0, "messages": 1}


def test_blank_categories_do_not_count_as_distinct(write_sources):
    sources = write_sources(
        players=[_player(1)],
        actions=[{"player_id": 1, "action_type": ""}, {"player_id": 1, "action_type": "craft"}],
    )

    registry, _ = load_players(sources)

    assert registry[1].total_actions == 2
    assert registry[1].unique_actions == 1


def test_duplicate_primary_rows_keep_first_position(write_sources):
    sources = write_sources(
        players=[_player(3, points="1"), _player(1), _player(3, points="9")],
    )

    registry, report = load_players(sources)

    assert list(registry) == [3, 1]
    assert registry[3].current_total_points == 9
    assert report.duplicate_player_ids == [3]


def test_registry_follows_primary_row_order(write_sources):
    sources = write_sources(players=[_player(10), _player(2), _player(7)])

    registry, _ = load_players(sources)

    assert list(registry) == [10, 2, 7]


def test_non_numeric_metric_is_fatal(write_sources):
    sources = write_sources(players=[_player(1, points="lots")])

    with pytest.raises(SourceLoadError, match="current_total_points"):
        load_players(sources)


def test_non_integer_player_id_is_fatal(write_sources):
    sources = write_sources(players=[_player(1)], actions=[{"player_id": "abc", "action_type": "x"}])

    with pytest.raises(SourceLoadError, match="row 2"):
        load_players(sources)


def test_missing_source_file_is_fatal(write_sources, tmp_path: Path):
    sources = write_sources(players=[_player(1)])
    broken = SourcePaths(
        players=sources.players,
        actions=sources.actions,
        events=tmp_path / "missing.csv",
        messages=sources.messages,
    )

    with pytest.raises(SourceLoadError, match="does not exist"):
        load_players(broken)


def test_build_base_registry_accepts_float_ids(tmp_path: Path):
    rows = [{"player_id": 4.0, "current_total_points": 12}]

    registry, duplicates = build_base_registry(rows, path=tmp_path / "players.xlsx")

    assert list(registry) == [4]
    assert duplicates == []


def test_aggregate_events_averages_per_player(tmp_path: Path):
    rows = [
        {"player_id": "1", "performance_score": "10"},
        {"player_id": "2", "performance_score": "4"},
        {"player_id": "1", "performance_score": "5"},
    ]

    events = aggregate_events(rows, path=tmp_path / "events.csv")

    assert events[1].total == 2
    assert events[1].average == pytest.approx(7.5)
    assert events[2].average == pytest.approx(4.0)


def test_merge_aggregates_leaves_base_untouched(tmp_path: Path):
    base, _ = build_base_registry(
        [{"player_id": 1}, {"player_id": 2}],
        path=tmp_path / "players.csv",
    )

    merged = merge_aggregates(
        base,
        actions={1: ActionAggregate(total=4, unique=2), 9: ActionAggregate(total=1, unique=1)},
        events={},
        messages={},
    )

    assert merged[1].total_actions == 4
    assert base[1].total_actions == 0
    assert merged[2] is base[2]
    assert 9 not in merged
