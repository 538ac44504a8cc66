"""AI visibility analyzer: how easily answer engines can extract and cite a page."""

import logging
import re

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerResult, Band, PageAnalyzer, score_bands
from analyzers.utils import (
    count_elements,
    count_pattern_matches,
    get_meta_content,
    has_element,
    has_schema_type,
    main_content_text,
    percentage,
)
from recommendations.engine import Priority, Recommendation

logger = logging.getLogger(__name__)

# Sentences keep their terminator so the concise-statement pattern can see it
SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]*")

CITABLE_PATTERNS = [
    re.compile(r"^[A-Z][^.!?]{20,150}[.!?]$"),
    re.compile(r"\b(?:is|are|means|refers to|defined as)\b", re.IGNORECASE),
    re.compile(r"\b\d+%"),
    re.compile(r"according to|research shows|studies indicate", re.IGNORECASE),
]

ATTRIBUTION_PATTERNS = [
    re.compile(r"according to [A-Z][a-z]+ [A-Z][a-z]+"),
    re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+ (?:said|stated|reported|found)\b"),
    re.compile(r"research by|study from|data from", re.IGNORECASE),
]

INSIGHT_PATTERNS = [
    re.compile(r"\bI found that\b", re.IGNORECASE),
    re.compile(r"\bour research shows\b", re.IGNORECASE),
    re.compile(r"\bin our experience\b", re.IGNORECASE),
    re.compile(r"\bwe discovered\b", re.IGNORECASE),
]

CITABLE_BANDS = [
    Band(10, 15),
    Band(
        5,
        10,
        Recommendation(
            text="Add more clear, concise statements that AI engines can easily cite",
            why="You have {value} citable sentences out of {total} ({pct}%). AI engines prefer content with 10+ short, fact-dense statements they can extract and quote directly.",
            how_to_fix='Add concise declarative statements such as "X is Y", "X means Y" or "Research shows X". Break long sentences into shorter ones and include data points.',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Structure content with short, fact-dense sentences for better AI citation",
            why="Only {value} of {total} sentences ({pct}%) are citable. Long, complex sentences are rarely extracted, so without bite-sized facts citation likelihood drops sharply.",
            how_to_fix='Restructure content into short declarative statements ("X is Y", "X costs $Y", "Studies show X"). Target 10 or more statements of 20-150 characters that answer common questions.',
            priority=Priority.CRITICAL,
        ),
    ),
]

ATTRIBUTION_BANDS = [
    Band(3, 10),
    Band(
        1,
        5,
        Recommendation(
            text="Add more attributed statements to authoritative sources",
            why="You have {value} attributed statement(s). Engines favour content that cites credible sources, ideally 3 or more, because attributed facts can be verified.",
            how_to_fix='Attribute key claims: "According to [Expert Name]", "Research by [Organization] shows", "[Source] reports that". Link to the original sources.',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Include statements attributed to experts or research for credibility",
            why="The content has no attributed statements, so it reads as opinion rather than verifiable fact and engines are less confident citing it.",
            how_to_fix="Add at least 3 attributions to named experts, organisations, studies or data sources, linking to the originals where possible.",
            priority=Priority.HIGH,
        ),
    ),
]

INSIGHT_BANDS = [
    Band(2, 10),
    Band(
        1,
        5,
        Recommendation(
            text="Highlight more unique insights and original findings",
            why="You have {value} original insight(s). Engines favour first-hand findings (2 or more) over rehashed information.",
            how_to_fix='Share original discoveries with phrases like "I found that", "Our research shows" or "We discovered", backed by your own data or testing.',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Add original research or unique perspectives to stand out to AI engines",
            why="The content has no original insights. Engines prefer unique findings over generic information that is available everywhere.",
            how_to_fix="Add your own testing results, observations, proprietary data or unexpected findings, and make these contributions prominent.",
            priority=Priority.HIGH,
        ),
    ),
]

ALT_COVERAGE_BANDS = [
    Band(90, 7),
    Band(
        50,
        4,
        Recommendation(
            text="Add alt text to all images for better accessibility and AI understanding",
            why="{missing} of {images} images lack alt text ({value}% coverage). Images without alt text are invisible to AI engines.",
            how_to_fix='Add a descriptive alt attribute to every <img>, describing what the image shows rather than just "image" or "photo".',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Most images lack alt text - add descriptive alt attributes",
            why="Only {value}% of your {images} images have alt text. Images without it give AI engines no information at all.",
            how_to_fix='Add alt="descriptive text" to every <img>, e.g. alt="Graph showing 40% increase in sales".',
            priority=Priority.CRITICAL,
        ),
    ),
]


def split_sentences(text: str) -> list[str]:
    """Non-empty, stripped sentences with their terminating punctuation."""
    return [s.strip() for s in SENTENCE_PATTERN.findall(text) if s.strip()]


def is_citable(sentence: str) -> bool:
    return any(pattern.search(sentence) for pattern in CITABLE_PATTERNS)


class AIVisibilityAnalyzer(PageAnalyzer):
    """Scores citation potential, structured answers and machine accessibility."""

    CATEGORIES = {
        "citationPotential": 35,
        "structuredAnswers": 35,
        "aiAccessibility": 30,
    }

    @property
    def name(self) -> str:
        return "aiVisibility"

    @property
    def label(self) -> str:
        return "AI Visibility"

    def analyze(
        self,
        soup: BeautifulSoup,
        url: str,
        target_keywords: list[str] | None = None,
    ) -> AnalyzerResult:
        findings = self.new_findings()
        recommendations: list[Recommendation] = []
        content = main_content_text(soup)

        self._check_citation_potential(content, findings["citationPotential"], recommendations)
        self._check_structured_answers(soup, content, findings["structuredAnswers"], recommendations)
        self._check_accessibility(soup, findings["aiAccessibility"], recommendations)

        return self.build_result(findings, recommendations)

    def _check_citation_potential(self, content, category, recommendations) -> None:
        sentences = split_sentences(content)
        citable = sum(1 for sentence in sentences if is_citable(sentence))
        citable_pct = percentage(citable, len(sentences))

        category.details["citableSentences"] = citable
        category.details["totalSentences"] = len(sentences)
        category.details["citablePercentage"] = citable_pct
        score_bands(
            category, citable, CITABLE_BANDS, recommendations,
            total=len(sentences), pct=citable_pct,
        )

        attributed = count_pattern_matches(content, ATTRIBUTION_PATTERNS)
        category.details["attributedStatements"] = attributed
        score_bands(category, attributed, ATTRIBUTION_BANDS, recommendations)

        insights = count_pattern_matches(content, INSIGHT_PATTERNS)
        category.details["originalInsights"] = insights
        score_bands(category, insights, INSIGHT_BANDS, recommendations)

    def _check_structured_answers(self, soup, content, category, recommendations) -> None:
        has_faq = has_schema_type(soup, "FAQPage")
        category.details["hasFAQSchema"] = has_faq

        if has_faq:
            category.add(15)
        else:
            recommendations.append(
                Recommendation(
                    text="Add FAQPage schema to structure Q&A content for AI engines",
                    why="No FAQPage schema was found. It makes question and answer pairs explicitly machine-readable, so engines can lift an answer without interpreting the page.",
                    how_to_fix="Add FAQPage JSON-LD with a mainEntity array of Question items, each with name and an acceptedAnswer containing the answer text.",
                    priority=Priority.HIGH,
                )
            )

        has_howto = has_schema_type(soup, "HowTo")
        category.details["hasHowToSchema"] = has_howto

        if has_howto:
            category.add(10)
        elif "how to" in content.lower():
            recommendations.append(
                Recommendation(
                    text="Add HowTo schema for step-by-step instructions",
                    why='The page contains "how to" content without HowTo schema. Step-by-step content marked up as HowTo is highly citable for instructional queries.',
                    how_to_fix="Add HowTo JSON-LD with a step array. Give each HowToStep a name, text and optionally an image.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Consider adding step-by-step instructions with HowTo schema",
                    why="The page has no instructional content. Procedural answers are among the formats answer engines cite most often.",
                    how_to_fix="Where the topic allows, add a short how-to section as an ordered list and mark it up with HowTo schema.",
                    priority=Priority.LOW,
                )
            )

        lists = count_elements(soup, "ul, ol")
        tables = count_elements(soup, "table")
        category.details["lists"] = lists
        category.details["tables"] = tables

        if lists >= 2 or tables >= 1:
            category.add(10)
        elif lists > 0:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Add more lists or tables to structure information clearly",
                    why=f"The page has {lists} list and no tables. Engines extract data most reliably from well-structured lists and tables.",
                    how_to_fix="Move comparisons, features, specifications or data sets into <table>, <ul> or <ol> elements.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Use lists and tables to organize information for AI parsing",
                    why="The content has no lists or tables. Engines strongly prefer data in list or tabular form for extraction and citation.",
                    how_to_fix="Convert prose into feature lists, comparison tables, step lists or data grids using <ul>, <ol> and <table>.",
                    priority=Priority.HIGH,
                )
            )

    def _check_accessibility(self, soup, category, recommendations) -> None:
        has_main = has_element(soup, "main")
        has_article = has_element(soup, "article")
        category.details["hasSemanticTags"] = has_main or has_article

        if has_main and has_article:
            category.add(10)
        elif has_main or has_article:
            category.add(7)
            recommendations.append(
                Recommendation(
                    text="Use both <main> and <article> tags for better content identification",
                    why=f"The page uses <{'main' if has_main else 'article'}> but not <{'article' if has_main else 'main'}>. Both tags together mark content boundaries so navigation and sidebars are not mistaken for content.",
                    how_to_fix="Wrap the primary content area in <main> and each content piece in <article>.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add semantic HTML tags (<main>, <article>) for AI content extraction",
                    why="The page has neither <main> nor <article>. Without them engines may extract navigation or boilerplate instead of your content.",
                    how_to_fix="Wrap the primary content in <main> and individual content pieces in <article>.",
                    priority=Priority.CRITICAL,
                )
            )

        viewport = get_meta_content(soup, "viewport")
        category.details["isMobileFriendly"] = bool(viewport)

        if viewport:
            category.add(5)
        else:
            recommendations.append(
                Recommendation(
                    text="Add viewport meta tag for mobile-friendliness",
                    why="No viewport meta tag was found. Mobile-friendliness is a quality signal, and a missing viewport suggests an outdated site.",
                    how_to_fix='Add <meta name="viewport" content="width=device-width, initial-scale=1.0"> to the <head>.',
                    priority=Priority.MEDIUM,
                )
            )

        h1_count = count_elements(soup, "h1")
        h2_count = count_elements(soup, "h2")
        h3_count = count_elements(soup, "h3")
        has_hierarchy = h1_count == 1 and h2_count > 0
        category.details["headingHierarchy"] = {"h1": h1_count, "h2": h2_count, "h3": h3_count}
        category.details["hasProperHierarchy"] = has_hierarchy

        if has_hierarchy:
            category.add(8)
        elif h1_count == 1:
            category.add(4)
            recommendations.append(
                Recommendation(
                    text="Add H2 and H3 subheadings for better content structure",
                    why="The page has an H1 but no H2 sections. Subheadings let engines locate and extract the section that answers a query.",
                    how_to_fix="Add H2 headings for major sections and H3 for subsections, using descriptive wording.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Fix heading hierarchy - use exactly one H1 and multiple H2/H3 tags",
                    why=f"The page has {h1_count} H1 headings. An unclear hierarchy reduces how accurately engines parse the structure.",
                    how_to_fix="Use one H1 for the page title, H2 for major sections and H3 for subsections.",
                    priority=Priority.HIGH,
                )
            )

        images = count_elements(soup, "img")
        images_with_alt = count_elements(soup, "img[alt]")
        category.details["imagesTotal"] = images
        category.details["imagesWithAlt"] = images_with_alt

        if images == 0:
            category.add(3)
            recommendations.append(
                Recommendation(
                    text="Add descriptive images with alt text to support your content",
                    why="The page has no images. Relevant images with alt text give engines another described source of context.",
                    how_to_fix="Add diagrams, screenshots or photos that illustrate key points, each with specific alt text.",
                    priority=Priority.LOW,
                )
            )
            return

        coverage = percentage(images_with_alt, images)
        category.details["altTextCoverage"] = coverage
        score_bands(
            category, coverage, ALT_COVERAGE_BANDS, recommendations,
            images=images, missing=images - images_with_alt,
        )
