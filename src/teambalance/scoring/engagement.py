"""Min-max normalization of player metrics into a single engagement score."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from teambalance.config import METRIC_FIELDS
from teambalance.models import PlayerRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricRange:
    minimum: float
    maximum: float

    @property
    def spread(self) -> float:
        return self.maximum - self.minimum


def metric_ranges(players: Sequence[PlayerRecord]) -> Dict[str, MetricRange]:
    """Return the min/max of every metric across ``players``."""

    ranges: Dict[str, MetricRange] = {}
    if not players:
        return ranges
    for metric in METRIC_FIELDS:
        values = [player.metric(metric) for player in players]
        ranges[metric] = MetricRange(minimum=min(values), maximum=max(values))
    return ranges


def normalize(value: float, bounds: MetricRange) -> float:
    # A metric every player shares contributes nothing, not a midpoint.
    if bounds.maximum > bounds.minimum:
        return (value - bounds.minimum) / bounds.spread
    return 0.0


def score_players(players: Sequence[PlayerRecord]) -> List[PlayerRecord]:
    """Return copies of ``players`` with ``engagement_score`` populated.

    Each metric is scaled to [0, 1] across the population and the ten scaled
    values are averaged with equal weight. Input order is preserved.
    """

    ranges = metric_ranges(players)
    for metric, bounds in ranges.items():
        logger.debug("Metric %s spans %.4f..%.4f", metric, bounds.minimum, bounds.maximum)

    scored: List[PlayerRecord] = []
    for player in players:
        total = 0.0
        for metric in METRIC_FIELDS:
            total += normalize(player.metric(metric), ranges[metric])
        payload = player.model_dump()
        payload["engagement_score"] = total / len(METRIC_FIELDS)
        scored.append(PlayerRecord.model_validate(payload))
    return scored
