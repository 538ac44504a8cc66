"""Tests for the query match analyzer."""

import pytest

from analyzers import QueryMatchAnalyzer
from analyzers.query_match import all_variations, generate_variations, is_question_heading
from recommendations import Priority
from tests.conftest import PAGE_URL, json_ld, make_soup


@pytest.fixture
def analyzer():
    return QueryMatchAnalyzer()


def article(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body><article>{body}</article></body></html>"


def texts(result) -> list[str]:
    return [r.text for r in result.recommendations]


class TestWithoutKeywords:
    @pytest.mark.parametrize("keywords", [None, [], ["  ", ""]])
    def test_not_applicable(self, analyzer, rich_soup, keywords):
        result = analyzer.analyze(rich_soup, PAGE_URL, keywords)

        assert result.score == 0
        assert result.grade == "N/A"
        assert [r.text for r in result.recommendations] == ["Add target keywords to analyze query match"]
        assert result.recommendations[0].priority == Priority.MEDIUM
        assert all(c.score == 0 for c in result.findings.values())
        assert result.to_dict()["details"]["targetKeywords"] == []


class TestKeywordPresence:
    def test_well_targeted_page(self, analyzer, rich_soup):
        result = analyzer.analyze(rich_soup, PAGE_URL, ["solar panels"])

        presence = result.findings["keywordPresence"]
        assert presence.score == 40
        placement = presence.details["keywords"]["solar panels"]
        assert placement["score"] == 15
        assert placement["locations"]["title"] is True
        assert placement["locations"]["description"] is False
        assert result.findings["answerPositioning"].score == 30
        assert result.findings["semanticRelevance"].details["keywordsInSupportingMarkup"] is True
        assert result.to_dict()["details"]["targetKeywords"] == ["solar panels"]

    def test_score_is_shared_across_keywords(self, analyzer, rich_soup):
        result = analyzer.analyze(rich_soup, PAGE_URL, ["solar panels", "heat pumps"])

        assert result.findings["keywordPresence"].score == 20
        title = next(r for r in result.recommendations if r.text == "Include target keywords in the page title")
        assert title.priority == Priority.HIGH
        assert '"heat pumps"' in title.why
        assert "solar panels" not in title.why

    def test_keywords_are_trimmed(self, analyzer, rich_soup):
        result = analyzer.analyze(rich_soup, PAGE_URL, ["  solar panels  "])
        assert result.to_dict()["details"]["targetKeywords"] == ["solar panels"]
        assert result.findings["keywordPresence"].score == 40


class TestAnswerPositioning:
    def test_late_answer_is_critical(self, analyzer):
        soup = make_soup(article("<p>" + "filler " * 120 + "solar panels</p>"))

        result = analyzer.analyze(soup, PAGE_URL, ["solar panels"])

        positioning = result.findings["answerPositioning"]
        assert positioning.details["earlyMentions"] == 0
        late = next(r for r in result.recommendations if r.text == "Answer the target query in the first 100 words")
        assert late.priority == Priority.CRITICAL
        assert positioning.details["firstParagraphWords"] == 122
        assert "Keep the opening paragraph between 20 and 80 words" in texts(result)

    def test_half_of_keywords_early(self, analyzer):
        soup = make_soup(article("<p>Solar panels are great. " + "filler " * 120 + "heat pumps</p>"))

        result = analyzer.analyze(soup, PAGE_URL, ["solar panels", "heat pumps"])

        assert result.findings["answerPositioning"].details["earlyMentions"] == 1
        assert "Mention every target keyword within the first 100 words" in texts(result)

    def test_question_heading_without_keyword(self, analyzer):
        soup = make_soup(article("<h2>How does it work?</h2><p>Solar panels work well.</p>"))

        result = analyzer.analyze(soup, PAGE_URL, ["solar panels"])

        positioning = result.findings["answerPositioning"]
        assert positioning.details["questionHeadings"] == 1
        assert positioning.details["keywordQuestionHeadings"] == 0
        assert "Include target keywords in your question headings" in texts(result)

    @pytest.mark.parametrize(
        "heading,expected",
        [
            ("How solar panels work", True),
            ("Are solar panels worth it?", True),
            ("Solar panel basics", False),
            ("  Which inverter  ", True),
        ],
    )
    def test_is_question_heading(self, heading, expected):
        assert is_question_heading(heading) is expected


class TestSemanticRelevance:
    def test_variations(self):
        assert generate_variations("Panel") == [
            "panels",
            "best panel",
            "panel guide",
            "how to panel",
            "panel tips",
        ]
        assert generate_variations("solar panels") == ["solar panel"]
        assert generate_variations("  ") == []

    def test_variations_are_deduplicated(self):
        assert all_variations(["Cats", "cats"]) == generate_variations("cats")

    def test_healthy_density(self, analyzer):
        soup = make_soup(article("<p>" + "word " * 98 + "solar panels</p>"))

        relevance = analyzer.analyze(soup, PAGE_URL, ["solar panels"]).findings["semanticRelevance"]

        assert relevance.details["keywordDensity"] == 1.0
        assert relevance.details["semanticCoverage"] == 0
        # 0 for coverage, 10 for density, 0 for supporting markup
        assert relevance.score == 10

    def test_keyword_stuffing(self, analyzer):
        soup = make_soup(article("<p>" + "solar panels " * 10 + "</p>"))

        result = analyzer.analyze(soup, PAGE_URL, ["solar panels"])

        assert result.findings["semanticRelevance"].details["keywordDensity"] == 50.0
        assert "Reduce keyword repetition to avoid keyword stuffing" in texts(result)

    def test_keyword_absent_from_content(self, analyzer):
        soup = make_soup(article("<p>Nothing relevant here at all.</p>"))

        result = analyzer.analyze(soup, PAGE_URL, ["solar panels"])

        absent = next(r for r in result.recommendations if r.text == "Target keywords do not appear in the main content")
        assert absent.priority == Priority.HIGH

    def test_keyword_in_structured_data(self, analyzer):
        head = json_ld({"@type": "Article", "headline": "Solar panels in 2024"})
        soup = make_soup(article("<p>Intro.</p>", head=head))

        relevance = analyzer.analyze(soup, PAGE_URL, ["solar panels"]).findings["semanticRelevance"]

        assert relevance.details["keywordsInSupportingMarkup"] is True


def test_scores_are_bounded(analyzer, thin_soup):
    result = analyzer.analyze(thin_soup, PAGE_URL, ["word", "missing"])

    assert 0 <= result.score <= 100
    for category in result.findings.values():
        assert 0 <= category.score <= category.max_score
