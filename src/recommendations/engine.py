"""Recommendation types plus the priority sort used by every analyzer and the orchestrator."""

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)


class Priority(str, enum.Enum):
    """Priority levels for recommendations, most urgent first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {
    Priority.CRITICAL: 1,
    Priority.HIGH: 2,
    Priority.MEDIUM: 3,
    Priority.LOW: 4,
}


@dataclass(frozen=True)
class Recommendation:
    """A single actionable recommendation."""

    text: str
    why: str
    how_to_fix: str
    priority: Priority
    analyzer: str | None = None  # Set when merged at the orchestrator level

    def tagged(self, analyzer: str) -> "Recommendation":
        """Return a copy attributed to the given analyzer."""
        return replace(self, analyzer=analyzer)

    def format(self, **context) -> "Recommendation":
        """Fill `{placeholders}` in the text fields with measured facts."""
        return replace(
            self,
            text=self.text.format(**context),
            why=self.why.format(**context),
            how_to_fix=self.how_to_fix.format(**context),
        )

    def to_dict(self) -> dict:
        data = {
            "text": self.text,
            "why": self.why,
            "howToFix": self.how_to_fix,
            "priority": self.priority.value,
        }
        if self.analyzer is not None:
            data["analyzer"] = self.analyzer
        return data


def sort_recommendations(
    recommendations: Iterable[Recommendation],
    limit: int | None = None,
) -> list[Recommendation]:
    """
    Sort recommendations by priority (critical first).

    The sort is stable: recommendations sharing a priority keep the
    order they were generated in.

    Args:
        recommendations: Recommendations in generation order
        limit: Maximum number to keep, or None for all

    Returns:
        New sorted (and possibly truncated) list
    """
    ordered = sorted(recommendations, key=lambda r: r.priority.rank)
    if limit is not None:
        ordered = ordered[:limit]
    return ordered


def merge_recommendations(
    groups: Iterable[tuple[str, Iterable[Recommendation]]],
    limit: int | None = None,
) -> list[Recommendation]:
    """
    Merge per-analyzer recommendation lists into one prioritized list.

    Args:
        groups: (analyzer label, recommendations) pairs in analyzer order
        limit: Maximum number to keep

    Returns:
        Tagged, priority-sorted recommendations
    """
    merged = []
    for label, recommendations in groups:
        merged.extend(r.tagged(label) for r in recommendations)

    top = sort_recommendations(merged, limit=limit)
    logger.debug(f"Merged {len(merged)} recommendations, keeping {len(top)}")
    return top
