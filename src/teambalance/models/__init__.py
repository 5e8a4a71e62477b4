"""Canonical models shared across ingestion, scoring and reporting."""

from .player import PlayerRecord
from .team import TeamSummary

__all__ = ["PlayerRecord", "TeamSummary"]
