"""Text and DOM helpers shared by all analyzers. Pure functions, no I/O."""

import json
import logging
import math
import re
from typing import Any
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

GRADE_THRESHOLDS = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]

MAIN_CONTENT_SELECTORS = ("article", "main", "body")

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WORD_TOKEN = re.compile(r"\b\w+\b")
_SILENT_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_CLUSTER = re.compile(r"[aeiouy]{1,2}")


def grade_from_score(score: float) -> str:
    """Map a 0-100 score to a letter grade."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def extract_text(soup: BeautifulSoup, selector: str) -> str:
    """Concatenated, stripped text of every element matching `selector`."""
    return "".join(el.get_text() for el in soup.select(selector)).strip()


def get_all_text(soup: BeautifulSoup, selector: str) -> list[str]:
    """Stripped text of each element matching `selector`."""
    return [el.get_text().strip() for el in soup.select(selector)]


def main_content_text(soup: BeautifulSoup) -> str:
    """
    Text of the page's main content.

    The first non-empty element among article, main and body wins, in
    that priority order.
    """
    for selector in MAIN_CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = element.get_text().strip()
        if text:
            return text
    return soup.get_text().strip()


def word_count(text: str) -> int:
    return len(text.split())


def count_keyword_occurrences(text: str, keywords: list[str]) -> int:
    """Case-insensitive whole-word occurrences of all keywords in `text`."""
    if not text or not keywords:
        return 0

    total = 0
    for keyword in keywords:
        keyword = keyword.strip()
        if not keyword:
            continue
        pattern = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
        total += len(pattern.findall(text))
    return total


def contains_keyword(text: str, keyword: str) -> bool:
    return count_keyword_occurrences(text, [keyword]) > 0


def count_pattern_matches(text: str, patterns: list[re.Pattern]) -> int:
    """Total matches of every pattern in `text`."""
    return sum(len(pattern.findall(text)) for pattern in patterns)


def count_syllables(word: str) -> int:
    """
    Approximate syllable count for one word.

    Not phonetically exact: strips a silent trailing e/ed/es and a
    leading y, then counts vowel clusters.
    """
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = _SILENT_SUFFIX.sub("", word)
    word = _LEADING_Y.sub("", word)
    matches = _VOWEL_CLUSTER.findall(word)
    return len(matches) if matches else 1


def count_text_syllables(text: str) -> int:
    return sum(count_syllables(word) for word in _WORD_TOKEN.findall(text.lower()))


def flesch_reading_ease(text: str) -> float:
    """Flesch reading ease score clamped to [0, 100]; 0 for empty text."""
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    words = text.split()
    if not sentences or not words:
        return 0.0

    syllables = count_text_syllables(text)
    score = (
        206.835
        - 1.015 * (len(words) / len(sentences))
        - 84.6 * (syllables / len(words))
    )
    return max(0.0, min(100.0, score))


def reading_level(flesch_score: float) -> str:
    if flesch_score >= 90:
        return "Very Easy (5th grade)"
    if flesch_score >= 80:
        return "Easy (6th grade)"
    if flesch_score >= 70:
        return "Fairly Easy (7th grade)"
    if flesch_score >= 60:
        return "Standard (8-9th grade)"
    if flesch_score >= 50:
        return "Fairly Difficult (10-12th grade)"
    if flesch_score >= 30:
        return "Difficult (College)"
    return "Very Difficult (College graduate)"


def reading_time_minutes(text: str) -> int:
    """Reading time at 200 words per minute."""
    return math.ceil(word_count(text) / 200)


def _try_parse_json(raw: str | None) -> Any | None:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.debug("Skipping malformed JSON-LD block")
        return None


def extract_structured_data(soup: BeautifulSoup) -> list[dict]:
    """
    Parse every JSON-LD block on the page.

    Blocks that fail to parse are skipped. Top-level arrays are
    flattened into separate items.
    """
    items = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        data = _try_parse_json(script.string)
        if isinstance(data, dict):
            items.append(data)
        elif isinstance(data, list):
            items.extend(item for item in data if isinstance(item, dict))
    return items


def _type_names(node: dict) -> list[str]:
    value = node.get("@type")
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def schema_types(items: list[dict]) -> list[str]:
    """All `@type` names of top-level items and their `@graph` members."""
    types = []
    for item in items:
        types.extend(_type_names(item))
        graph = item.get("@graph")
        if isinstance(graph, list):
            for node in graph:
                if isinstance(node, dict):
                    types.extend(_type_names(node))
    return types


def has_schema_type(soup: BeautifulSoup, type_name: str) -> bool:
    """True if any JSON-LD item (or `@graph` member) has the given `@type`."""
    return type_name in schema_types(extract_structured_data(soup))


def get_meta_content(soup: BeautifulSoup, name: str) -> str:
    """Content of `meta[name=..]` or `meta[property=..]`, or an empty string."""
    meta = soup.find("meta", attrs={"name": name}) or soup.find(
        "meta", attrs={"property": name}
    )
    if meta is None:
        return ""
    return (meta.get("content") or "").strip()


def count_elements(soup: BeautifulSoup, selector: str) -> int:
    return len(soup.select(selector))


def has_element(soup: BeautifulSoup, selector: str) -> bool:
    return soup.select_one(selector) is not None


def link_host(href: str, base_url: str = "") -> str:
    """
    Network location of a link, resolved against `base_url`.

    Malformed targets (e.g. an unclosed IPv6 bracket) yield an empty
    string instead of raising.
    """
    try:
        return urlparse(urljoin(base_url, href) if base_url else href).netloc
    except ValueError:
        logger.debug(f"Skipping malformed link: {href!r}")
        return ""


def round_half_up(value: float) -> int:
    """Round halves away from zero for positives (12.5 -> 13), unlike round()."""
    return math.floor(value + 0.5)


def percentage(value: float, total: float) -> int:
    """value / total as a rounded percentage, or 0 when total is 0."""
    if total == 0:
        return 0
    return round_half_up(value / total * 100)
