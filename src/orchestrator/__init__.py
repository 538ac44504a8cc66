from orchestrator.runner import (
    AnalysisInputError,
    AnalysisRunner,
    normalize_keywords,
    normalize_url,
    run_complete_analysis,
)
from orchestrator.scoring import WEIGHTS, compute_overall_score

__all__ = [
    "AnalysisInputError",
    "AnalysisRunner",
    "WEIGHTS",
    "compute_overall_score",
    "normalize_keywords",
    "normalize_url",
    "run_complete_analysis",
]
