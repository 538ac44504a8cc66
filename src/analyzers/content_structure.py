"""Content structure analyzer: readability, Q&A patterns, factual density."""

import logging
import re

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerResult, Band, PageAnalyzer, score_bands
from analyzers.utils import (
    count_elements,
    count_pattern_matches,
    flesch_reading_ease,
    main_content_text,
    reading_level,
    reading_time_minutes,
    round_half_up,
    word_count,
)
from recommendations.engine import Priority, Recommendation

logger = logging.getLogger(__name__)

QUESTION_PATTERNS = [
    re.compile(r"\bwhat is\b", re.IGNORECASE),
    re.compile(r"\bhow to\b", re.IGNORECASE),
    re.compile(r"\bwhy\b", re.IGNORECASE),
    re.compile(r"\bwhen\b", re.IGNORECASE),
    re.compile(r"\bwhere\b", re.IGNORECASE),
    re.compile(r"\bwho\b", re.IGNORECASE),
    re.compile(r"\?\s*$", re.MULTILINE),
]

CITATION_PATTERNS = [
    re.compile(r"according to", re.IGNORECASE),
    re.compile(r"research shows", re.IGNORECASE),
    re.compile(r"study found", re.IGNORECASE),
    re.compile(r"source:", re.IGNORECASE),
]

STATISTIC_PATTERN = re.compile(r"\b\d+(?:\.\d+)?%?\b")
PARAGRAPH_SPLIT = re.compile(r"\n\n+")
# Sentences keep their terminator so questions can be told apart
SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]*")

WORD_COUNT_BANDS = [
    Band(1000, 15),
    Band(
        500,
        10,
        Recommendation(
            text="Expand content to 1000+ words for better AI comprehension and authority",
            why="AI models cite substantial content more confidently. At {value} words the page covers the topic, but not in enough depth to be the most complete source for an answer.",
            how_to_fix="Expand the content to at least 1,000 words. Add examples, statistics, step-by-step detail and the benefits and drawbacks of each option. Current word count: {value} words.",
            priority=Priority.HIGH,
        ),
    ),
    Band(
        0,
        5,
        Recommendation(
            text="Content is too short. Add more comprehensive information (aim for 1000+ words)",
            why="Content under 500 words is treated as thin content. At {value} words the page lacks the depth answer engines need and signals low expertise.",
            how_to_fix="Significantly expand the page with detailed explanations, examples, step-by-step guides and an FAQ. Target at least 1,000 words. Current word count: {value} words.",
            priority=Priority.CRITICAL,
        ),
    ),
]

FAQ_ANSWER_BANDS = [
    Band(3, 15),
    Band(
        1,
        7,
        Recommendation(
            text="Add more direct question-answer pairs to increase AI citation likelihood",
            why="You have {value} question-answer pair(s), but pages with 3 or more clear Q&A patterns are far easier for AI to extract and cite when users ask similar questions.",
            how_to_fix='Add questions throughout the content followed immediately by direct answers, e.g. "How long does it take? It takes about 2 hours." Aim for at least 5 pairs.',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Structure content with clear questions followed by concise answers",
            why="The content has no question-answer patterns. Engines match user questions to content that asks and answers them explicitly; without that structure they have to infer answers.",
            how_to_fix="Rewrite key sections as explicit question-answer pairs using real question marks. Start with 5 common user questions and answer each in 2-3 sentences right after it.",
            priority=Priority.HIGH,
        ),
    ),
]

STATISTIC_BANDS = [
    Band(5, 10),
    Band(
        1,
        5,
        Recommendation(
            text="Add more statistics and data points to increase factual density",
            why="You have {value} number(s) or statistic(s). Specific figures are what answer engines quote; pages with 5 or more data points read as evidence-based.",
            how_to_fix='Replace vague statements with precise data: "73% of users" instead of "many users". Add costs, durations, measurements and success rates.',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Include specific numbers, percentages, and statistics to support claims",
            why="The content contains no numerical data. Without numbers it reads as opinion rather than fact, which makes engines less confident citing it.",
            how_to_fix='Add at least 5 specific data points, e.g. "costs $50", "takes 2 hours", "improves efficiency by 40%".',
            priority=Priority.HIGH,
        ),
    ),
]

LIST_ITEM_BANDS = [
    Band(5, 10),
    Band(
        1,
        5,
        Recommendation(
            text="Add more lists to improve content scanability and structure",
            why="You have {value} list item(s). AI engines extract discrete points from lists easily, and 5 or more items per key section works best.",
            how_to_fix="Convert features, steps, requirements and options into <ul> or <ol> lists with at least 5 items.",
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Use bullet points or numbered lists to organize information clearly",
            why="The page has no lists. Important facts blend into paragraphs, which lowers extraction accuracy.",
            how_to_fix="Identify groups of related items (steps, benefits, requirements) and format them as <ul> or <ol> lists, starting with at least 5 items.",
            priority=Priority.HIGH,
        ),
    ),
]

CITATION_BANDS = [
    Band(3, 10),
    Band(
        1,
        5,
        Recommendation(
            text="Add more citations and references to strengthen credibility",
            why="You have {value} citation(s). Engines prefer content backed by 3 or more references to authoritative sources.",
            how_to_fix='Reference research, industry reports or expert statements with phrases like "According to [source]" or "Research shows", and link to the originals.',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Reference authoritative sources to support your claims",
            why="The content cites no external sources. Unsupported claims are far less likely to be cited than fact-backed statements.",
            how_to_fix='Add at least 3 citations to reputable sources, e.g. "According to the CDC" or "Research by Stanford found", linking to each source.',
            priority=Priority.HIGH,
        ),
    ),
]


class ContentStructureAnalyzer(PageAnalyzer):
    """
    Checks how readable, question-oriented and fact-dense the main content is.
    """

    CATEGORIES = {
        "readability": 35,
        "qaPatterns": 35,
        "factualDensity": 30,
    }

    @property
    def name(self) -> str:
        return "contentStructure"

    @property
    def label(self) -> str:
        return "Content Structure"

    def analyze(
        self,
        soup: BeautifulSoup,
        url: str,
        target_keywords: list[str] | None = None,
    ) -> AnalyzerResult:
        findings = self.new_findings()
        recommendations: list[Recommendation] = []
        content = main_content_text(soup)

        self._check_readability(content, findings["readability"], recommendations)
        self._check_qa_patterns(soup, content, findings["qaPatterns"], recommendations)
        self._check_factual_density(soup, content, findings["factualDensity"], recommendations)

        return self.build_result(findings, recommendations)

    def _check_readability(self, content, category, recommendations) -> None:
        """Length, Flesch score and paragraph size (35 points)."""
        words = word_count(content)
        category.details["wordCount"] = words
        category.details["readingTime"] = reading_time_minutes(content)

        score_bands(category, words, WORD_COUNT_BANDS, recommendations)

        flesch = flesch_reading_ease(content)
        rounded = round_half_up(flesch)
        category.details["fleschScore"] = rounded
        category.details["readingLevel"] = reading_level(flesch)

        if 60 <= flesch <= 70:
            category.add(10)
        elif 50 <= flesch < 80:
            category.add(7)
            recommendations.append(
                Recommendation(
                    text="Good readability, but consider simplifying complex sentences for better AI parsing",
                    why=f"Your Flesch Reading Ease score is {rounded}. It is acceptable, but scores between 60 and 70 maximise both human and AI comprehension.",
                    how_to_fix=f"Aim for 15-20 words per sentence and prefer plain words where they do not lose meaning. Target Flesch score: 60-70. Current score: {rounded}.",
                    priority=Priority.MEDIUM,
                )
            )
        elif flesch < 50:
            category.add(3)
            recommendations.append(
                Recommendation(
                    text="Content is difficult to read. Simplify sentences and reduce jargon for better AI understanding",
                    why=f"Your Flesch score of {rounded} indicates very complex content. Engines parse academic-level prose less accurately and often prefer a more accessible source.",
                    how_to_fix="Split sentences over 25 words, replace jargon with plain alternatives and use the active voice. Target Flesch score: 60-70.",
                    priority=Priority.HIGH,
                )
            )
        else:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Content may be too simplistic. Add depth and precise terminology",
                    why=f"Your Flesch score of {rounded} suggests very short sentences and simple vocabulary. Content that reads too simply can look shallow next to sources that explain the topic fully.",
                    how_to_fix="Combine choppy sentences, introduce the correct domain terms (with short definitions) and add explanatory detail. Target Flesch score: 60-70.",
                    priority=Priority.LOW,
                )
            )

        paragraphs = [p for p in PARAGRAPH_SPLIT.split(content) if p.strip()]
        category.details["paragraphCount"] = len(paragraphs)
        avg_length = (
            sum(word_count(p) for p in paragraphs) / len(paragraphs) if paragraphs else 0
        )
        rounded_avg = round_half_up(avg_length)
        category.details["avgParagraphLength"] = rounded_avg

        if 50 <= avg_length <= 150:
            category.add(10)
        elif avg_length < 50:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Paragraphs are too short. Combine related ideas for better flow",
                    why=f"Your paragraphs average {rounded_avg} words. Very short paragraphs read as fragments; engines prefer paragraphs that develop one complete idea.",
                    how_to_fix="Merge related short paragraphs so each develops one idea with supporting detail. Aim for 50-150 words (3-5 sentences) per paragraph.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Break down long paragraphs into shorter chunks for better scanability",
                    why=f"Your paragraphs average {rounded_avg} words. Paragraphs over 150 words are hard to scan and hide individual facts.",
                    how_to_fix="Split long paragraphs at natural break points so each covers one idea in 50-150 words.",
                    priority=Priority.MEDIUM,
                )
            )

    def _check_qa_patterns(self, soup, content, category, recommendations) -> None:
        """FAQ schema, question phrasing and question-answer pairs (35 points)."""
        question_count = count_pattern_matches(content, QUESTION_PATTERNS)
        category.details["questionCount"] = question_count

        json_ld_text = "".join(
            script.get_text()
            for script in soup.find_all("script", attrs={"type": "application/ld+json"})
        )
        has_faq_schema = "FAQPage" in json_ld_text
        category.details["hasFAQSchema"] = has_faq_schema

        if has_faq_schema:
            category.add(20)
        elif question_count >= 3:
            category.add(10)
            recommendations.append(
                Recommendation(
                    text="Add FAQPage schema markup to highlight your Q&A content for AI engines",
                    why=f"You have {question_count} questions in your content but no FAQPage schema. The schema makes the question-and-answer structure explicit and machine-readable.",
                    how_to_fix='Add FAQPage JSON-LD listing each question as a "Question" with its "acceptedAnswer". Follow the schema.org/FAQPage format.',
                    priority=Priority.HIGH,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add FAQ section with common questions to improve AI answer potential",
                    why="The content barely addresses questions. When users ask AI engines questions, the engines look for pages that already answer them.",
                    how_to_fix='Add an FAQ section with 5-10 common questions as H2/H3 headings ("What is...", "How to...", "Why..."), each followed by a 2-3 sentence answer, then add FAQPage schema.',
                    priority=Priority.HIGH,
                )
            )

        sentences = [s.strip() for s in SENTENCE_PATTERN.findall(content) if s.strip()]
        answer_patterns = sum(
            1
            for idx, sentence in enumerate(sentences)
            if sentence.endswith("?") and idx + 1 < len(sentences)
        )
        category.details["answerPatterns"] = answer_patterns

        score_bands(category, answer_patterns, FAQ_ANSWER_BANDS, recommendations)

    def _check_factual_density(self, soup, content, category, recommendations) -> None:
        """Statistics, lists and citations (30 points)."""
        statistics = len(STATISTIC_PATTERN.findall(content))
        category.details["statisticsCount"] = statistics
        score_bands(category, statistics, STATISTIC_BANDS, recommendations)

        list_items = count_elements(soup, "li")
        category.details["listItems"] = list_items
        score_bands(category, list_items, LIST_ITEM_BANDS, recommendations)

        citations = count_pattern_matches(content, CITATION_PATTERNS)
        category.details["citationCount"] = citations
        score_bands(category, citations, CITATION_BANDS, recommendations)
