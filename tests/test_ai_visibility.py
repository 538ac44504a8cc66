"""Tests for the AI visibility analyzer."""

import pytest

from analyzers import AIVisibilityAnalyzer
from analyzers.ai_visibility import is_citable, split_sentences
from recommendations import Priority
from tests.conftest import PAGE_URL, json_ld, make_soup


@pytest.fixture
def analyzer():
    return AIVisibilityAnalyzer()


def article(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body><article>{body}</article></body></html>"


def texts(result) -> list[str]:
    return [r.text for r in result.recommendations]


class TestSentences:
    def test_split_keeps_terminators(self):
        assert split_sentences("First one. Second? Third!") == ["First one.", "Second?", "Third!"]
        assert split_sentences("  ") == []

    @pytest.mark.parametrize(
        "sentence,expected",
        [
            ("This sentence has more than twenty characters.", True),
            ("Sales grew 40% last year", True),
            ("AEO refers to answer engine optimization", True),
            ("ok.", False),
            ("hello there", False),
        ],
    )
    def test_is_citable(self, sentence, expected):
        assert is_citable(sentence) is expected


class TestCitationPotential:
    def test_many_citable_sentences(self, analyzer):
        soup = make_soup(article("<p>" + "Solar power is clean. " * 10 + "</p>"))

        result = analyzer.analyze(soup, PAGE_URL)

        citation = result.findings["citationPotential"]
        assert citation.details["citableSentences"] == 10
        assert citation.details["citablePercentage"] == 100
        assert citation.score == 15
        assert "Include statements attributed to experts or research for credibility" in texts(result)
        assert "Add original research or unique perspectives to stand out to AI engines" in texts(result)

    def test_few_citable_sentences_are_critical(self, analyzer):
        soup = make_soup(article("<p>ok. fine. sure.</p>"))

        result = analyzer.analyze(soup, PAGE_URL)

        citation = result.findings["citationPotential"]
        assert citation.details["citableSentences"] == 0
        assert citation.details["totalSentences"] == 3
        assert result.recommendations[0].priority == Priority.CRITICAL

    def test_attribution_and_insights(self, analyzer):
        body = (
            "<p>Costs fell sharply according to Jane Doe. Research by the lab confirmed it. "
            "Data from the survey agrees. I found that output varies. We discovered savings.</p>"
        )

        citation = analyzer.analyze(make_soup(article(body)), PAGE_URL).findings["citationPotential"]

        assert citation.details["attributedStatements"] == 3
        assert citation.details["originalInsights"] == 2
        # 5 citable sentences earn 10, attribution 10, insights 10
        assert citation.score == 30


class TestStructuredAnswers:
    def test_rich_page(self, analyzer, rich_soup):
        result = analyzer.analyze(rich_soup, PAGE_URL)

        structured = result.findings["structuredAnswers"]
        assert structured.details["hasFAQSchema"] is True
        assert structured.details["hasHowToSchema"] is False
        assert structured.details["lists"] == 2
        assert structured.score == 25
        assert "Add HowTo schema for step-by-step instructions" in texts(result)

    def test_howto_schema(self, analyzer):
        soup = make_soup(article("<p>Steps.</p><table></table>", head=json_ld({"@type": "HowTo"})))

        structured = analyzer.analyze(soup, PAGE_URL).findings["structuredAnswers"]

        assert structured.details["hasHowToSchema"] is True
        assert structured.score == 20

    def test_no_instructional_content(self, analyzer):
        soup = make_soup(article("<p>Nothing procedural.</p><ul><li>One</li></ul>"))

        result = analyzer.analyze(soup, PAGE_URL)

        assert result.findings["structuredAnswers"].score == 5
        howto = next(r for r in result.recommendations if r.text.startswith("Consider adding step-by-step"))
        assert howto.priority == Priority.LOW


class TestAccessibility:
    def test_rich_page_is_fully_accessible(self, analyzer, rich_soup):
        accessibility = analyzer.analyze(rich_soup, PAGE_URL).findings["aiAccessibility"]

        assert accessibility.details["altTextCoverage"] == 100
        assert accessibility.score == 30

    def test_page_without_images(self, analyzer):
        soup = make_soup("<html><body><main><article><h1>T</h1><h2>S</h2></article></main></body></html>")

        result = analyzer.analyze(soup, PAGE_URL)

        accessibility = result.findings["aiAccessibility"]
        assert accessibility.details["imagesTotal"] == 0
        assert accessibility.score == 21
        images = next(r for r in result.recommendations if r.text.startswith("Add descriptive images"))
        assert images.priority == Priority.LOW

    @pytest.mark.parametrize(
        "imgs,points,priority",
        [
            ('<img src="a" alt="A"><img src="b">', 4, Priority.MEDIUM),
            ('<img src="a"><img src="b">', 0, Priority.CRITICAL),
        ],
    )
    def test_alt_text_coverage(self, analyzer, imgs, points, priority):
        result = analyzer.analyze(make_soup(f"<body>{imgs}</body>"), PAGE_URL)

        accessibility = result.findings["aiAccessibility"]
        assert accessibility.score == points
        alt = next(r for r in result.recommendations if "alt text" in r.text.lower() and "images" in r.why)
        assert alt.priority == priority
        assert "2 images" in alt.why

    def test_missing_semantic_tags_is_critical(self, analyzer, thin_soup):
        result = analyzer.analyze(thin_soup, PAGE_URL)

        assert result.findings["aiAccessibility"].details["hasSemanticTags"] is False
        assert "Add semantic HTML tags (<main>, <article>) for AI content extraction" in texts(result)


def test_empty_document(analyzer, empty_soup):
    result = analyzer.analyze(empty_soup, PAGE_URL)

    citation = result.findings["citationPotential"]
    assert citation.details["totalSentences"] == 0
    assert citation.details["citablePercentage"] == 0
    assert 0 <= result.score <= 100
