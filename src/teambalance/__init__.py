"""Engagement-balanced team reassignment for player activity exports."""

__version__ = "0.1.0"
