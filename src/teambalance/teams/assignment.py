"""Round-robin team assignment over the engagement ranking."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Sequence

from teambalance.models import PlayerRecord


logger = logging.getLogger(__name__)

_TEAM_COUNT_PATTERN = re.compile(r"\d+")


class TeamAssignmentError(ValueError):
    """Raised when the requested team count is unusable."""


def validate_team_count(value: Any) -> int:
    """Return ``value`` as a positive int, accepting ints or plain digit strings."""

    if isinstance(value, bool):
        raise TeamAssignmentError("Invalid number of teams")
    if isinstance(value, str):
        text = value.strip()
        if not _TEAM_COUNT_PATTERN.fullmatch(text):
            raise TeamAssignmentError("Invalid number of teams")
        value = int(text)
    if not isinstance(value, int) or value < 1:
        raise TeamAssignmentError("Invalid number of teams")
    return value


def rank_players(players: Sequence[PlayerRecord]) -> List[PlayerRecord]:
    """Sort by engagement score, highest first; ties keep their input order."""

    return sorted(players, key=lambda player: player.engagement_score, reverse=True)


def assign_teams(players: Sequence[PlayerRecord], num_teams: int) -> Dict[int, int]:
    """Map each player_id to a team in ``1..num_teams`` by ``rank % num_teams``."""

    num_teams = validate_team_count(num_teams)
    assignment: Dict[int, int] = {}
    for rank, player in enumerate(rank_players(players)):
        assignment[player.player_id] = (rank % num_teams) + 1
    if num_teams > len(players):
        logger.warning(
            "Requested %s teams for %s players; %s teams will be empty",
            num_teams,
            len(players),
            num_teams - len(players),
        )
    return assignment
