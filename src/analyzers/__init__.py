"""Citewise analyzers package."""

from analyzers.ai_visibility import AIVisibilityAnalyzer
from analyzers.base import AnalyzerResult, BaseAnalyzer, Category, PageAnalyzer
from analyzers.content_structure import ContentStructureAnalyzer
from analyzers.page_eeat import PageLevelEEATAnalyzer
from analyzers.query_match import QueryMatchAnalyzer
from analyzers.site_eeat import SiteLevelEEATAnalyzer
from analyzers.technical_foundation import TechnicalFoundationAnalyzer

# Page analyzers in reporting order; recommendations merge in this order too
PAGE_ANALYZERS = (
    TechnicalFoundationAnalyzer,
    ContentStructureAnalyzer,
    PageLevelEEATAnalyzer,
    QueryMatchAnalyzer,
    AIVisibilityAnalyzer,
)

__all__ = [
    "AIVisibilityAnalyzer",
    "AnalyzerResult",
    "BaseAnalyzer",
    "Category",
    "ContentStructureAnalyzer",
    "PAGE_ANALYZERS",
    "PageAnalyzer",
    "PageLevelEEATAnalyzer",
    "QueryMatchAnalyzer",
    "SiteLevelEEATAnalyzer",
    "TechnicalFoundationAnalyzer",
]
