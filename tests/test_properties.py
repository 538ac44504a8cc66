"""Properties every page analyzer must hold, plus per-pattern checks of the regex classifiers."""

from datetime import datetime, timedelta, timezone

import pytest

from analyzers import PAGE_ANALYZERS, PageLevelEEATAnalyzer, TechnicalFoundationAnalyzer
from analyzers.ai_visibility import ATTRIBUTION_PATTERNS, CITABLE_PATTERNS, INSIGHT_PATTERNS
from analyzers.content_structure import CITATION_PATTERNS, QUESTION_PATTERNS
from analyzers.page_eeat import CREDENTIAL_PATTERNS, EXPERIENCE_PATTERNS
from analyzers.utils import grade_from_score
from recommendations import Priority
from tests.conftest import PAGE_URL, THIN_PAGE, json_ld, make_soup, rich_page

PAGES = {
    "empty": "",
    "thin": THIN_PAGE,
    "rich": rich_page(),
    "broken": "<html><body><h1>Unclosed <p>text <img><table><tr><td>x"
    + '<script type="application/ld+json">{"@graph": "nope"}</script>',
    "schema-only": json_ld({"@type": "FAQPage"}),
}

KEYWORD_SETS = [[], ["solar panels"], ["solar panels", "pump"]]


@pytest.mark.parametrize("analyzer_cls", PAGE_ANALYZERS, ids=lambda cls: cls.__name__)
@pytest.mark.parametrize("page", PAGES, ids=str)
@pytest.mark.parametrize("keywords", KEYWORD_SETS, ids=len)
def test_analyzer_properties(analyzer_cls, page, keywords):
    analyzer = analyzer_cls()

    first = analyzer.analyze(make_soup(PAGES[page]), PAGE_URL, keywords)
    second = analyzer.analyze(make_soup(PAGES[page]), PAGE_URL, keywords)

    assert first.to_dict() == second.to_dict()
    assert 0 <= first.score <= 100
    assert sum(c.max_score for c in first.findings.values()) == 100
    for category in first.findings.values():
        assert 0 <= category.score <= category.max_score
    if first.grade != "N/A":
        assert first.grade == grade_from_score(first.score)
    if first.score < 100:
        assert first.recommendations
    assert all(isinstance(r.priority, Priority) for r in first.recommendations)
    assert len(first.recommendations) <= 10


STALE = datetime.now(timezone.utc) - timedelta(days=400)


@pytest.mark.parametrize(
    "analyzer_cls,html,url,category,expected",
    [
        (
            TechnicalFoundationAnalyzer,
            rich_page().replace(f'<link rel="canonical" href="{PAGE_URL}">', ""),
            PAGE_URL,
            "crawlability",
            "Add canonical URL to prevent duplicate content issues",
        ),
        (
            TechnicalFoundationAnalyzer,
            rich_page().replace("<h2>What are solar panels?</h2>", ""),
            PAGE_URL,
            "htmlStructure",
            "Add H2 subheadings to improve content structure and scanability",
        ),
        (
            TechnicalFoundationAnalyzer,
            rich_page().replace('"@type": "Person"', '"@type": "Thing"'),
            PAGE_URL,
            "schemaMarkup",
            "Add Person or Organization schema to establish authorship",
        ),
        (
            PageLevelEEATAnalyzer,
            rich_page(),
            PAGE_URL.replace("https:", "http:"),
            "trustworthiness",
            "Use HTTPS for security and trust signals",
        ),
        (
            PageLevelEEATAnalyzer,
            rich_page(modified=STALE),
            PAGE_URL,
            "authoritativeness",
            "Content is outdated - update with current data and mark with new dateModified",
        ),
    ],
    ids=["canonical", "subheadings", "authorship", "https", "freshness"],
)
def test_short_category_is_explained_by_its_recommendation(analyzer_cls, html, url, category, expected):
    result = analyzer_cls().analyze(make_soup(html), url)

    short = [name for name, c in result.findings.items() if c.score < c.max_score]
    assert short == [category]
    assert [r.text for r in result.recommendations] == [expected]


def test_analyzers_do_not_modify_the_document():
    soup = make_soup(rich_page())
    before = str(soup)

    for analyzer_cls in PAGE_ANALYZERS:
        analyzer_cls().analyze(soup, PAGE_URL, ["solar panels"])

    assert str(soup) == before


def matches(patterns, text) -> list[bool]:
    return [bool(p.search(text)) for p in patterns]


@pytest.mark.parametrize(
    "patterns,samples",
    [
        (
            EXPERIENCE_PATTERNS,
            ["I tested the router", "We implemented caching", "In my experience it works", "after using it"],
        ),
        (
            CREDENTIAL_PATTERNS,
            ["a licensed electrician", "with 12 years of experience", "an expert in tax law", "specialized in audits"],
        ),
        (
            CITABLE_PATTERNS,
            ["Solar output depends on the season.", "it refers to a method", "up 35% this year", "studies indicate growth"],
        ),
        (
            ATTRIBUTION_PATTERNS,
            ["according to Jane Doe", "Mary Smith reported losses", "data from the census"],
        ),
        (
            INSIGHT_PATTERNS,
            ["I found that it fails", "our research shows gains", "in our experience", "we discovered a bug"],
        ),
        (
            QUESTION_PATTERNS,
            ["what is a heat pump", "how to install", "why now", "when to buy", "where to go", "who pays", "Really?"],
        ),
        (
            CITATION_PATTERNS,
            ["according to the report", "research shows", "a study found", "Source: NREL"],
        ),
    ],
)
def test_each_pattern_has_a_matching_sample(patterns, samples):
    assert len(samples) == len(patterns)
    for index, sample in enumerate(samples):
        assert matches(patterns, sample)[index], f"pattern {index} did not match {sample!r}"


@pytest.mark.parametrize(
    "patterns,text",
    [
        (EXPERIENCE_PATTERNS, "The device was tested by a lab."),
        (CREDENTIAL_PATTERNS, "Anyone can write about this."),
        (INSIGHT_PATTERNS, "The results were found elsewhere."),
        (CITATION_PATTERNS, "Plain prose without references."),
    ],
)
def test_patterns_ignore_unrelated_text(patterns, text):
    assert not any(matches(patterns, text))
