"""Weighted overall score across the page analyzers."""

from analyzers.utils import grade_from_score, round_half_up

# Site-level E-E-A-T is informational and never weighted
WEIGHTS = {
    "technicalFoundation": 0.25,
    "contentStructure": 0.25,
    "pageLevelEEAT": 0.20,
    "queryMatch": 0.15,
    "aiVisibility": 0.15,
}


def compute_overall_score(scores: dict[str, int]) -> int:
    """
    Weighted sum of page analyzer scores, rounded half up.

    Missing analyzers count as 0, as does Query Match when it had no
    keywords to score.
    """
    total = sum(scores.get(name, 0) * weight for name, weight in WEIGHTS.items())
    # Weights are not exact in binary; trim float noise before rounding
    return max(0, min(100, round_half_up(round(total, 6))))


def overall_grade(score: int) -> str:
    return grade_from_score(score)
