"""Per-team statistics and the justification text shown in reports."""

from __future__ import annotations

from statistics import fmean
from typing import Dict, List, Mapping, Sequence

from teambalance.config import iter_sources
from teambalance.models import PlayerRecord, TeamSummary


def _source_description() -> str:
    labels = [spec.label for spec in iter_sources()]
    return ", ".join(labels[:-1]) + f" and {labels[-1]}"


def _justification(team_id: int, size: int, avg: float, low: float, high: float) -> str:
    noun = "player" if size == 1 else "players"
    return (
        f"Team {team_id} has {size} {noun} with an average engagement score of {avg:.2f}. "
        f"Scores within the team span a range of {high - low:.2f} (min: {low:.2f}, max: {high:.2f}). "
        "Players were dealt round-robin in descending engagement order, using scores "
        f"built from all four data sources: {_source_description()}."
    )


def summarize_teams(
    assignment: Mapping[int, int],
    players: Sequence[PlayerRecord],
) -> List[TeamSummary]:
    """Group players by assigned team and describe each group, ascending by team."""

    groups: Dict[int, List[PlayerRecord]] = {}
    for player in players:
        team_id = assignment.get(player.player_id)
        if team_id is None:
            raise KeyError(f"player {player.player_id} has no team assignment")
        groups.setdefault(team_id, []).append(player)

    summaries: List[TeamSummary] = []
    for team_id in sorted(groups):
        members = groups[team_id]
        scores = [member.engagement_score for member in members]
        avg = fmean(scores)
        low = min(scores)
        high = max(scores)
        summaries.append(
            TeamSummary(
                team_id=team_id,
                player_ids=[member.player_id for member in members],
                avg_score=avg,
                min_score=low,
                max_score=high,
                score_range=high - low,
                justification=_justification(team_id, len(members), avg, low, high),
            )
        )
    return summaries
