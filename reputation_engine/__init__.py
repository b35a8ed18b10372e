"""Reputation Engine — Package."""

from reputation_engine.engine import ProfileCredibilityAggregator, aggregate_profile
from reputation_engine.timeline import narrate, narrate_timeline

__all__ = [
    "ProfileCredibilityAggregator",
    "aggregate_profile",
    "narrate",
    "narrate_timeline",
]
