"""Citewise recommendations package."""

from recommendations.engine import (
    PRIORITY_RANK,
    Priority,
    Recommendation,
    merge_recommendations,
    sort_recommendations,
)

__all__ = [
    "PRIORITY_RANK",
    "Priority",
    "Recommendation",
    "merge_recommendations",
    "sort_recommendations",
]
