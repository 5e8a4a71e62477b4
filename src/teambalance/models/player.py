"""Canonical player model shared across ingestion and scoring layers."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlayerRecord(BaseModel):
    """Per-player activity metrics merged from all sources."""

    player_id: int

    current_total_points: float = 0.0
    historical_events_participated: float = 0.0
    historical_messages_sent: float = 0.0
    days_active_last_30: float = 0.0

    total_actions: int = Field(default=0, ge=0)
    unique_actions: int = Field(default=0, ge=0)
    total_events: int = Field(default=0, ge=0)
    avg_event_performance: float = 0.0
    total_messages: int = Field(default=0, ge=0)
    unique_recipients: int = Field(default=0, ge=0)

    engagement_score: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    def metric(self, name: str) -> float:
        value = getattr(self, name)
        return float(value or 0)
