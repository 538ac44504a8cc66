"""Score trends across repeated analyses of the same URL."""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from analyzers.utils import round_half_up


class ScoredAnalysis(Protocol):
    overall_score: int | None
    created_at: datetime


def calculate_trend(current: ScoredAnalysis | None, previous: ScoredAnalysis | None) -> dict:
    """
    Compare the latest analysis of a URL with the one before it.

    Delta and percentage are reported as magnitudes; the direction is
    carried by `trend`. Percentage is 0 when the previous score was 0.
    """
    if current is None or previous is None:
        return {
            "hasPreviousAnalysis": False,
            "message": "No previous analysis for comparison",
        }

    current_score = current.overall_score or 0
    previous_score = previous.overall_score or 0
    delta = current_score - previous_score
    percentage = (
        abs(round_half_up(delta / previous_score * 100)) if previous_score > 0 else 0
    )

    if delta > 0:
        trend = "up"
    elif delta < 0:
        trend = "down"
    else:
        trend = "same"

    elapsed = current.created_at - previous.created_at
    return {
        "hasPreviousAnalysis": True,
        "previousScore": previous_score,
        "previousDate": previous.created_at.isoformat(),
        "currentScore": current_score,
        "currentDate": current.created_at.isoformat(),
        "delta": abs(delta),
        "trend": trend,
        "percentage": percentage,
        "daysSince": round_half_up(elapsed.total_seconds() / 86400),
    }


def trend_from_history(analyses: Sequence[ScoredAnalysis]) -> dict:
    """Trend between the two newest of `analyses` (newest first)."""
    if len(analyses) < 2:
        return calculate_trend(None, None)
    return calculate_trend(analyses[0], analyses[1])


def trend_history(analyses: Sequence[ScoredAnalysis]) -> list[dict]:
    """Chronological score points, oldest first."""
    ordered = sorted(analyses, key=lambda a: a.created_at)
    return [
        {"score": a.overall_score, "date": a.created_at.isoformat()}
        for a in ordered
    ]
