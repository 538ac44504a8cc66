"""Base analyzer interface and shared result types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup

from analyzers.utils import grade_from_score
from config import settings
from recommendations.engine import Recommendation, sort_recommendations


@dataclass
class Category:
    """
    One scoring category inside an analyzer.

    Points are added through `add`, which never lets the score leave
    the range [0, max_score].
    """

    max_score: int
    score: int = 0
    details: dict[str, Any] = field(default_factory=dict)

    def add(self, points: int) -> None:
        self.score = max(0, min(self.max_score, self.score + points))

    def to_dict(self) -> dict:
        return {"score": self.score, "details": self.details}


@dataclass(frozen=True)
class Band:
    """
    One step of a threshold ladder.

    Ladders are evaluated top-down; the first band whose `minimum` the
    measured value reaches awards its points and emits its
    recommendation, if any.
    """

    minimum: float
    points: int
    recommendation: Recommendation | None = None


def score_bands(
    category: Category,
    value: float,
    bands: list[Band],
    recommendations: list[Recommendation],
    **context: Any,
) -> None:
    """Apply the first matching band of a ladder to `category`."""
    for band in bands:
        if value >= band.minimum:
            category.add(band.points)
            if band.recommendation is not None:
                recommendations.append(band.recommendation.format(value=value, **context))
            return


@dataclass(frozen=True)
class AnalyzerResult:
    """Standard result format for all analyzers."""

    score: int
    grade: str
    findings: dict[str, Category]
    recommendations: list[Recommendation]
    max_score: int = 100
    extra_details: dict[str, Any] = field(default_factory=dict)

    @property
    def breakdown(self) -> dict[str, dict]:
        return {
            name: {"score": category.score, "max": category.max_score}
            for name, category in self.findings.items()
        }

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "grade": self.grade,
            "findings": {name: c.to_dict() for name, c in self.findings.items()},
            "recommendations": [r.to_dict() for r in self.recommendations],
            "details": {
                "maxScore": self.max_score,
                "breakdown": self.breakdown,
                **self.extra_details,
            },
        }


class BaseAnalyzer(ABC):
    """Abstract base class for all analyzers."""

    # Category name -> point budget, in reporting order
    CATEGORIES: dict[str, int] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Return analyzer key used in the overall result."""
        pass

    @property
    @abstractmethod
    def label(self) -> str:
        """Return the human-readable name used to tag recommendations."""
        pass

    def new_findings(self) -> dict[str, Category]:
        """Create a fresh, zeroed category map for one invocation."""
        return {
            name: Category(max_score=budget)
            for name, budget in self.CATEGORIES.items()
        }

    def build_result(
        self,
        findings: dict[str, Category],
        recommendations: list[Recommendation],
        **extra_details: Any,
    ) -> AnalyzerResult:
        """Total the categories, grade them and sort the recommendations."""
        total = sum(category.score for category in findings.values())
        total = max(0, min(100, total))

        return AnalyzerResult(
            score=total,
            grade=grade_from_score(total),
            findings=findings,
            recommendations=sort_recommendations(
                recommendations, limit=settings.analyzer_max_recommendations
            ),
            extra_details=extra_details,
        )


class PageAnalyzer(BaseAnalyzer):
    """An analyzer that scores a single, already-parsed page."""

    @abstractmethod
    def analyze(
        self,
        soup: BeautifulSoup,
        url: str,
        target_keywords: list[str] | None = None,
    ) -> AnalyzerResult:
        """
        Score the given document.

        Args:
            soup: Parsed page. Treated as read-only.
            url: Final URL of the page
            target_keywords: Optional keywords the page should rank for

        Returns:
            AnalyzerResult with category scores and recommendations
        """
        pass
