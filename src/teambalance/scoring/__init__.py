"""Engagement scoring built on min-max normalized activity metrics."""

from .engagement import MetricRange, metric_ranges, normalize, score_players

__all__ = ["MetricRange", "metric_ranges", "normalize", "score_players"]
