"""Run the load, score, assign and summarize stages as one pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from teambalance.ingest import LoadReport, SourcePaths, load_players
from teambalance.models import PlayerRecord, TeamSummary
from teambalance.scoring import score_players
from teambalance.teams import assign_teams, summarize_teams, validate_team_count


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    players: List[PlayerRecord]
    assignment: Dict[int, int]
    summaries: List[TeamSummary]
    load_report: LoadReport
    num_teams: int


def run_pipeline(sources: SourcePaths, num_teams: int) -> PipelineResult:
    """Validate the team count, then load sources and build team assignments."""

    num_teams = validate_team_count(num_teams)

    registry, load_report = load_players(sources)
    players = score_players(list(registry.values()))
    assignment = assign_teams(players, num_teams)
    summaries = summarize_teams(assignment, players)

    logger.info("Assigned %s players across %s teams", len(assignment), len(summaries))
    return PipelineResult(
        players=players,
        assignment=assignment,
        summaries=summaries,
        load_report=load_report,
        num_teams=num_teams,
    )
