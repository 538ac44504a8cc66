"""Tests for the page-level E-E-A-T analyzer."""

from datetime import datetime, timedelta, timezone

import pytest

from analyzers import PageLevelEEATAnalyzer
from analyzers.page_eeat import is_authority_host
from recommendations import Priority
from tests.conftest import MALFORMED_LINK, PAGE_URL, make_soup, rich_page


@pytest.fixture
def analyzer():
    return PageLevelEEATAnalyzer()


def days_ago(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def texts(result) -> list[str]:
    return [r.text for r in result.recommendations]


def test_strong_page_scores_full_marks(analyzer, rich_soup):
    result = analyzer.analyze(rich_soup, PAGE_URL)

    assert result.findings["experience"].details["experienceIndicators"] == 6
    assert result.findings["expertise"].details["hasAuthorSchema"] is True
    assert result.findings["authoritativeness"].details["authorityLinks"] == 3
    assert result.score == 100
    assert result.recommendations == []


def test_page_without_signals(analyzer, thin_soup):
    result = analyzer.analyze(thin_soup, PAGE_URL)

    assert result.findings["experience"].score == 0
    assert result.findings["expertise"].score == 0
    assert result.findings["trustworthiness"].score == 10
    critical = [r.text for r in result.recommendations if r.priority == Priority.CRITICAL]
    assert "Add clear author attribution - AI engines heavily weight author credentials" in critical
    assert result.grade == "F"


class TestExpertise:
    def test_byline_without_schema(self, analyzer):
        soup = make_soup('<body><p class="byline">By Sam Lee</p></body>')

        result = analyzer.analyze(soup, PAGE_URL)

        expertise = result.findings["expertise"]
        assert expertise.score == 10
        assert expertise.details["authorName"] == "By Sam Lee"
        rec = next(r for r in result.recommendations if r.text.startswith("Add Person schema"))
        assert rec.priority == Priority.HIGH
        assert "By Sam Lee" in rec.why

    def test_credentials_band(self, analyzer):
        soup = make_soup("<body><article><p>Written by a licensed PhD chemist.</p></article></body>")

        expertise = analyzer.analyze(soup, PAGE_URL).findings["expertise"]

        assert expertise.details["credentialMentions"] == 2


class TestFreshness:
    def test_recent_update(self, analyzer):
        soup = make_soup(rich_page(modified=days_ago(10)))
        authority = analyzer.analyze(soup, PAGE_URL).findings["authoritativeness"]
        assert authority.details["monthsSinceUpdate"] == 0
        assert authority.score == 25

    def test_update_between_six_and_twelve_months(self, analyzer):
        result = analyzer.analyze(make_soup(rich_page(modified=days_ago(200))), PAGE_URL)

        assert result.findings["authoritativeness"].score == 20
        assert result.findings["authoritativeness"].details["monthsSinceUpdate"] == 7
        assert any(t.startswith("Content is over 6 months old") for t in texts(result))

    def test_stale_content(self, analyzer):
        result = analyzer.analyze(make_soup(rich_page(modified=days_ago(400))), PAGE_URL)

        authority = result.findings["authoritativeness"]
        assert authority.score == 15
        assert authority.details["monthsSinceUpdate"] == 13
        stale = next(r for r in result.recommendations if r.text.startswith("Content is outdated"))
        assert stale.priority == Priority.HIGH

    def test_time_element_fallback(self, analyzer):
        soup = make_soup('<body><time datetime="2020-01-01">Jan 1</time></body>')

        authority = analyzer.analyze(soup, PAGE_URL).findings["authoritativeness"]

        assert authority.details["lastUpdated"] == "2020-01-01"
        assert authority.details["monthsSinceUpdate"] > 12

    @pytest.mark.parametrize(
        "head",
        [
            "",
            '<meta property="article:modified_time" content="last tuesday">',
        ],
    )
    def test_missing_or_unparseable_date(self, analyzer, head):
        soup = make_soup(f"<html><head>{head}</head><body></body></html>")

        result = analyzer.analyze(soup, PAGE_URL)

        assert result.findings["authoritativeness"].details["monthsSinceUpdate"] is None
        assert "Add dateModified metadata to show content freshness" in texts(result)


class TestAuthorityLinks:
    def test_own_domain_links_are_not_external(self, analyzer):
        body = (
            '<a href="https://example.com/about">About</a>'
            '<a href="https://www.cdc.gov/flu">CDC</a>'
            '<a href="https://blog.vendor.com/post">Vendor</a>'
        )
        soup = make_soup(f"<body>{body}</body>")

        authority = analyzer.analyze(soup, PAGE_URL).findings["authoritativeness"]

        assert authority.details["externalLinks"] == 2
        assert authority.details["authorityLinks"] == 1

    def test_malformed_links_are_skipped(self, analyzer):
        soup = make_soup(f'<body>{MALFORMED_LINK}<a href="https://www.cdc.gov/flu">CDC</a></body>')

        authority = analyzer.analyze(soup, PAGE_URL).findings["authoritativeness"]

        assert authority.details["externalLinks"] == 1
        assert authority.details["authorityLinks"] == 1

    @pytest.mark.parametrize(
        "host,expected",
        [
            ("www.nih.gov", True),
            ("en.wikipedia.org", True),
            ("cs.stanford.edu", True),
            ("www.ox.ac.uk", True),
            ("example.com", False),
            ("gov.example.com", False),
            ("www.cdc.gov:443", True),
        ],
    )
    def test_is_authority_host(self, host, expected):
        assert is_authority_host(host) is expected


class TestTrust:
    def test_plain_http_is_critical(self, analyzer, rich_soup):
        result = analyzer.analyze(rich_soup, "http://example.com/guides/solar-panels")

        trust = result.findings["trustworthiness"]
        assert trust.details["isSecure"] is False
        assert trust.score == 15
        assert result.recommendations[0].text == "Use HTTPS for security and trust signals"

    def test_address_counts_as_contact(self, analyzer):
        soup = make_soup("<body><address>1 Main St</address><a href='/terms'>Terms</a></body>")

        trust = analyzer.analyze(soup, PAGE_URL).findings["trustworthiness"]

        assert trust.details["hasContactInfo"] is True
        assert trust.details["hasPrivacyPolicy"] is True
        assert trust.score == 25
