"""Team partitioning and per-team summaries."""

from .assignment import TeamAssignmentError, assign_teams, rank_players, validate_team_count
from .summary import summarize_teams

__all__ = [
    "TeamAssignmentError",
    "assign_teams",
    "rank_players",
    "summarize_teams",
    "validate_team_count",
]
