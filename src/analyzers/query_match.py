"""Query match analyzer: how well a page targets the keywords it should rank for."""

import logging
import re

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerResult, Band, PageAnalyzer, score_bands
from analyzers.utils import (
    contains_keyword,
    count_keyword_occurrences,
    extract_structured_data,
    extract_text,
    get_all_text,
    get_meta_content,
    main_content_text,
    percentage,
    round_half_up,
    word_count,
)
from recommendations.engine import Priority, Recommendation

logger = logging.getLogger(__name__)

# (location, points) awarded per keyword; capped at KEYWORD_CAP
PLACEMENT_WEIGHTS = {
    "title": 5,
    "h1": 5,
    "description": 3,
    "firstParagraph": 3,
    "headings": 2,
    "frequency": 2,
}
KEYWORD_CAP = 15
MIN_OCCURRENCES = 3
EARLY_MENTION_WORDS = 100

QUESTION_WORDS = re.compile(
    r"^(?:what|how|why|when|where|who|which|can|does|do|is|are|should)\b",
    re.IGNORECASE,
)

VARIATION_TEMPLATES = ("best {}", "{} guide", "how to {}", "{} tips")

PLACEMENT_RECOMMENDATIONS = {
    "title": Recommendation(
        text="Include target keywords in the page title",
        why="These keywords are missing from the title: {keywords}. The title is the strongest single signal of what query a page answers.",
        how_to_fix="Rewrite the title so it names the primary keyword naturally, ideally near the start, while staying within 30-60 characters.",
        priority=Priority.HIGH,
    ),
    "h1": Recommendation(
        text="Include target keywords in the H1 heading",
        why="These keywords are missing from the H1: {keywords}. Engines read the H1 as the topic statement of the page.",
        how_to_fix="Rephrase the H1 to contain the primary keyword, for example as the question the page answers.",
        priority=Priority.HIGH,
    ),
    "description": Recommendation(
        text="Add target keywords to the meta description",
        why="These keywords are missing from the meta description: {keywords}. Engines use the description as a ready-made summary of the page.",
        how_to_fix="Write a 120-160 character description that answers the query and mentions the keyword once.",
        priority=Priority.MEDIUM,
    ),
    "firstParagraph": Recommendation(
        text="Mention target keywords in the opening paragraph",
        why="These keywords do not appear in the first paragraph: {keywords}. Answers placed up front are the ones engines extract.",
        how_to_fix="Open with a one or two sentence direct answer that uses the keyword, then expand below it.",
        priority=Priority.MEDIUM,
    ),
    "headings": Recommendation(
        text="Use target keywords in subheadings",
        why="These keywords appear in no heading: {keywords}. Headings tell engines which section answers which query.",
        how_to_fix="Add H2 or H3 headings that contain the keyword, such as \"What is <keyword>?\" or \"How to choose <keyword>\".",
        priority=Priority.MEDIUM,
    ),
    "frequency": Recommendation(
        text="Mention target keywords more often in the body content",
        why="These keywords appear fewer than 3 times in the main content: {keywords}. Sparse usage weakens the topical signal.",
        how_to_fix="Use each keyword naturally at least 3 times across the content, including close variations.",
        priority=Priority.LOW,
    ),
}

COVERAGE_BANDS = [
    Band(50, 15),
    Band(
        30,
        8,
        Recommendation(
            text="Cover more variations of your target keywords",
            why="{value}% of keyword variations appear in the content ({found} of {total}). Engines match many phrasings of the same question to one page.",
            how_to_fix="Work in missing variations naturally, e.g.: {missing}.",
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Expand content to address related searches and keyword variations",
            why="Only {value}% of keyword variations appear in the content ({found} of {total}). The page matches a narrow set of phrasings.",
            how_to_fix="Add sections covering related phrasings and plural forms, e.g.: {missing}.",
            priority=Priority.HIGH,
        ),
    ),
]


def generate_variations(keyword: str) -> list[str]:
    """
    Naive variations of a keyword.

    Every keyword gets a singular/plural toggle; single-word keywords
    also get the templated variations.
    """
    keyword = keyword.lower().strip()
    if not keyword:
        return []

    variations = [keyword[:-1] if keyword.endswith("s") else keyword + "s"]
    if " " not in keyword:
        variations.extend(template.format(keyword) for template in VARIATION_TEMPLATES)
    return variations


def all_variations(keywords: list[str]) -> list[str]:
    """Deduplicated variations of every keyword, in first-seen order."""
    seen = []
    for keyword in keywords:
        for variation in generate_variations(keyword):
            if variation not in seen:
                seen.append(variation)
    return seen


def first_paragraph(soup: BeautifulSoup) -> str:
    for text in get_all_text(soup, "p"):
        if text:
            return text
    return ""


def is_question_heading(text: str) -> bool:
    text = text.strip()
    return text.endswith("?") or bool(QUESTION_WORDS.match(text))


class QueryMatchAnalyzer(PageAnalyzer):
    """
    Scores keyword placement, answer positioning and semantic coverage
    for the target keywords of a page.

    With no target keywords there is nothing to match against: the
    analyzer returns score 0 with grade "N/A" and a single instruction.
    """

    CATEGORIES = {
        "keywordPresence": 40,
        "answerPositioning": 30,
        "semanticRelevance": 30,
    }

    @property
    def name(self) -> str:
        return "queryMatch"

    @property
    def label(self) -> str:
        return "Query Match"

    def analyze(
        self,
        soup: BeautifulSoup,
        url: str,
        target_keywords: list[str] | None = None,
    ) -> AnalyzerResult:
        keywords = [k.strip() for k in (target_keywords or []) if k and k.strip()]
        if not keywords:
            return self._no_keywords_result()

        findings = self.new_findings()
        recommendations: list[Recommendation] = []
        content = main_content_text(soup)
        opening = first_paragraph(soup)

        self._check_keyword_presence(
            soup, content, opening, keywords, findings["keywordPresence"], recommendations
        )
        self._check_answer_positioning(
            soup, content, opening, keywords, findings["answerPositioning"], recommendations
        )
        self._check_semantic_relevance(
            soup, content, keywords, findings["semanticRelevance"], recommendations
        )

        return self.build_result(findings, recommendations, targetKeywords=keywords)

    def _no_keywords_result(self) -> AnalyzerResult:
        return AnalyzerResult(
            score=0,
            grade="N/A",
            findings=self.new_findings(),
            recommendations=[
                Recommendation(
                    text="Add target keywords to analyze query match",
                    why="No target keywords were provided, so there is nothing to measure keyword placement, answer positioning or semantic coverage against.",
                    how_to_fix="Re-run the analysis with 1-5 keywords or questions you want this page to be cited for.",
                    priority=Priority.MEDIUM,
                )
            ],
            extra_details={"targetKeywords": []},
        )

    def _keyword_locations(self, soup, content, opening, keyword) -> dict[str, bool]:
        headings = " ".join(get_all_text(soup, "h1, h2, h3, h4, h5, h6"))
        return {
            "title": contains_keyword(extract_text(soup, "title"), keyword),
            "h1": contains_keyword(" ".join(get_all_text(soup, "h1")), keyword),
            "description": contains_keyword(get_meta_content(soup, "description"), keyword),
            "firstParagraph": contains_keyword(opening, keyword),
            "headings": contains_keyword(headings, keyword),
            "frequency": count_keyword_occurrences(content, [keyword]) >= MIN_OCCURRENCES,
        }

    def _check_keyword_presence(self, soup, content, opening, keywords, category, recommendations) -> None:
        """Weighted placement per keyword, normalized to the 40-point budget."""
        per_keyword = {}
        missed = {location: [] for location in PLACEMENT_WEIGHTS}
        total = 0

        for keyword in keywords:
            locations = self._keyword_locations(soup, content, opening, keyword)
            points = min(
                KEYWORD_CAP,
                sum(PLACEMENT_WEIGHTS[loc] for loc, found in locations.items() if found),
            )
            per_keyword[keyword] = {"score": points, "locations": locations}
            total += points

            if points < KEYWORD_CAP:
                for location, found in locations.items():
                    if not found:
                        missed[location].append(keyword)

        category.add(round_half_up(total / (len(keywords) * KEYWORD_CAP) * 40))
        category.details["keywords"] = per_keyword

        for location, missing in missed.items():
            if missing:
                recommendations.append(
                    PLACEMENT_RECOMMENDATIONS[location].format(
                        keywords=", ".join(f'"{k}"' for k in missing)
                    )
                )

    def _check_answer_positioning(self, soup, content, opening, keywords, category, recommendations) -> None:
        early_text = " ".join(content.split()[:EARLY_MENTION_WORDS])
        early = [k for k in keywords if contains_keyword(early_text, k)]
        early_ratio = len(early) / len(keywords)
        category.details["earlyMentions"] = len(early)

        if early_ratio == 1:
            category.add(15)
        elif early_ratio >= 0.5:
            category.add(10)
            recommendations.append(
                Recommendation(
                    text="Mention every target keyword within the first 100 words",
                    why=f"{len(early)} of {len(keywords)} keywords appear in the first 100 words. Engines weigh the opening of a page most when choosing an answer.",
                    how_to_fix="Rework the introduction so each target keyword is addressed in the first two or three sentences.",
                    priority=Priority.MEDIUM,
                )
            )
        elif early:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Move answers for your target keywords closer to the top",
                    why=f"Only {len(early)} of {len(keywords)} keywords appear in the first 100 words, so most answers are buried below the fold.",
                    how_to_fix="Start with a short summary that answers each target query directly, then go into detail.",
                    priority=Priority.HIGH,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Answer the target query in the first 100 words",
                    why="None of the target keywords appear in the first 100 words. Content that answers up front is far more likely to be extracted.",
                    how_to_fix="Open the page with a 40-60 word direct answer that names the keyword, before any background or introduction.",
                    priority=Priority.CRITICAL,
                )
            )

        question_headings = [h for h in get_all_text(soup, "h2, h3") if is_question_heading(h)]
        matching = [h for h in question_headings if any(contains_keyword(h, k) for k in keywords)]
        category.details["questionHeadings"] = len(question_headings)
        category.details["keywordQuestionHeadings"] = len(matching)

        if matching:
            category.add(10)
        elif question_headings:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Include target keywords in your question headings",
                    why=f"The page has {len(question_headings)} question heading(s) but none mention a target keyword, so they do not line up with the queries you want to win.",
                    how_to_fix="Rephrase question headings around your keywords, e.g. \"What is the best <keyword>?\".",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add question-style headings that match how users search",
                    why="No H2 or H3 is phrased as a question. Users ask engines questions, and headings that mirror them are matched directly.",
                    how_to_fix="Add H2/H3 headings such as \"What is <keyword>?\" or \"How does <keyword> work?\" followed by a direct answer.",
                    priority=Priority.MEDIUM,
                )
            )

        opening_words = word_count(opening)
        category.details["firstParagraphWords"] = opening_words

        if 20 <= opening_words <= 80:
            category.add(5)
        elif opening:
            category.add(2)
            recommendations.append(
                Recommendation(
                    text="Keep the opening paragraph between 20 and 80 words",
                    why=f"The first paragraph is {opening_words} words. Openings of 20-80 words are the right size to be quoted as a complete answer.",
                    how_to_fix="Tighten or expand the first paragraph into a self-contained answer of 20-80 words.",
                    priority=Priority.LOW,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add an opening paragraph that answers the query",
                    why="The page has no paragraph text, so there is no concise answer an engine could quote.",
                    how_to_fix="Add a <p> of 20-80 words near the top that answers the main query directly.",
                    priority=Priority.MEDIUM,
                )
            )

    def _check_semantic_relevance(self, soup, content, keywords, category, recommendations) -> None:
        variations = all_variations(keywords)
        found = [v for v in variations if contains_keyword(content, v)]
        missing = [v for v in variations if v not in found]
        coverage = percentage(len(found), len(variations))

        category.details["variations"] = variations
        category.details["variationsFound"] = found
        category.details["semanticCoverage"] = coverage
        score_bands(
            category, coverage, COVERAGE_BANDS, recommendations,
            found=len(found),
            total=len(variations),
            missing=", ".join(f'"{v}"' for v in missing[:5]),
        )

        words = word_count(content)
        occurrences = count_keyword_occurrences(content, keywords)
        density = occurrences / words * 100 if words else 0.0
        category.details["keywordDensity"] = round(density, 2)

        if 0.5 <= density <= 3.0:
            category.add(10)
        elif density > 3.0:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Reduce keyword repetition to avoid keyword stuffing",
                    why=f"Keyword density is {density:.1f}%. Above 3% content reads as stuffed, which lowers quality signals.",
                    how_to_fix="Replace some repetitions with synonyms, pronouns or natural variations so density falls to 0.5-3%.",
                    priority=Priority.MEDIUM,
                )
            )
        elif density > 0:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Use target keywords more consistently throughout the content",
                    why=f"Keyword density is {density:.2f}%. Below 0.5% the topic signal is too weak for engines to connect the page to the query.",
                    how_to_fix="Mention the keywords naturally in headings, the introduction and the conclusion to reach 0.5-3% density.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Target keywords do not appear in the main content",
                    why="None of the target keywords occur in the main content, so the page is unlikely to be matched to those queries at all.",
                    how_to_fix="Write content that addresses each keyword directly, using the exact phrase in the body text.",
                    priority=Priority.HIGH,
                )
            )

        alt_text = " ".join(img.get("alt", "") for img in soup.find_all("img"))
        schema_text = " ".join(str(item) for item in extract_structured_data(soup))
        in_supporting = any(
            contains_keyword(alt_text, k) or contains_keyword(schema_text, k) for k in keywords
        )
        category.details["keywordsInSupportingMarkup"] = in_supporting

        if in_supporting:
            category.add(5)
        else:
            recommendations.append(
                Recommendation(
                    text="Reference target keywords in image alt text or structured data",
                    why="No target keyword appears in image alt text or JSON-LD. These machine-readable fields reinforce the page topic.",
                    how_to_fix="Describe relevant images with alt text that includes the keyword and use it in your schema name or headline.",
                    priority=Priority.LOW,
                )
            )
