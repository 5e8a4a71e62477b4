from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TeamSummary(BaseModel):
    team_id: int = Field(..., ge=1)
    player_ids: List[int]
    avg_score: float
    min_score: float
    max_score: float
    score_range: float
    justification: str

    model_config = ConfigDict(frozen=True)
