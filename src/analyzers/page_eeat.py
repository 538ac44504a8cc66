"""Page-level E-E-A-T analyzer: experience, expertise, authoritativeness, trust."""

import logging
import re
from datetime import datetime, timezone

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerResult, Band, PageAnalyzer, score_bands
from analyzers.utils import (
    count_elements,
    count_pattern_matches,
    get_meta_content,
    has_element,
    has_schema_type,
    link_host,
    main_content_text,
    round_half_up,
)
from recommendations.engine import Priority, Recommendation

logger = logging.getLogger(__name__)

EXPERIENCE_PATTERNS = [
    re.compile(r"\bI\s+(?:tested|tried|used|experienced|found|discovered)\b", re.IGNORECASE),
    re.compile(r"\bwe\s+(?:tested|tried|used|implemented|discovered)\b", re.IGNORECASE),
    re.compile(r"\bin\s+my\s+experience\b", re.IGNORECASE),
    re.compile(r"\bafter\s+using\b", re.IGNORECASE),
]

CREDENTIAL_PATTERNS = [
    re.compile(r"\b(?:PhD|MD|MBA|certified|licensed|accredited|qualified)\b", re.IGNORECASE),
    re.compile(r"\byears of experience\b", re.IGNORECASE),
    re.compile(r"\bexpert in\b", re.IGNORECASE),
    re.compile(r"\bspecialized in\b", re.IGNORECASE),
]

# Host suffixes treated as high-authority link targets
AUTHORITY_DOMAINS = (
    ".gov",
    ".edu",
    ".org",
    ".int",
    ".gov.uk",
    ".ac.uk",
    ".edu.au",
    "wikipedia.org",
    "nih.gov",
    "cdc.gov",
)

DAYS_PER_MONTH = 30

EXPERIENCE_BANDS = [
    Band(5, 15),
    Band(
        2,
        10,
        Recommendation(
            text="Add more first-hand experience details to strengthen E-E-A-T signals",
            why='You have {value} experience indicators, but AI engines favour content with 5 or more first-hand accounts ("I tested", "we tried", "in my experience").',
            how_to_fix="Share specific testing results, observations, challenges and lessons learned in the first person. Include timelines and measured outcomes.",
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Include personal experience and testing details - AI engines prioritize first-hand knowledge",
            why="The content has {value} first-hand experience indicators. Without them it reads as theoretical or second-hand, which answer engines weigh heavily against.",
            how_to_fix='Describe what you personally tested, tried or discovered using phrases like "I tested", "we implemented" or "in my experience", with concrete results. Add at least 5 such details.',
            priority=Priority.CRITICAL,
        ),
    ),
]

CREDENTIAL_BANDS = [
    Band(2, 10),
    Band(
        1,
        5,
        Recommendation(
            text="Highlight more author credentials and qualifications in content",
            why="Credentials are mentioned {value} time(s). Stating expertise at least twice (degrees, certifications, years of experience) makes it visible to engines assessing the author.",
            how_to_fix='Mention qualifications in the author bio and naturally in the content, e.g. "As a certified financial planner with 10 years of experience...".',
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Mention author expertise, credentials, or years of experience in the field",
            why="The content mentions no credentials or qualifications, so there is no evidence the author is qualified to write on the topic.",
            how_to_fix="Add degrees, certifications, years of experience and specialisations to the author bio and reference them in the content.",
            priority=Priority.HIGH,
        ),
    ),
]

AUTHORITY_LINK_BANDS = [
    Band(3, 15),
    Band(
        1,
        10,
        Recommendation(
            text="Add more links to authoritative sources (.gov, .edu, peer-reviewed research)",
            why="You have {value} link(s) to authoritative sources. Three or more references to high-authority domains signal well-researched, verifiable content.",
            how_to_fix="Link key claims to government data (.gov), academic research (.edu), established organisations (.org) or peer-reviewed studies, inline where each claim is made.",
            priority=Priority.MEDIUM,
        ),
    ),
    Band(
        0,
        0,
        Recommendation(
            text="Link to authoritative sources to support claims and demonstrate research",
            why="The page links to no authoritative sources, so engines cannot verify its claims against trusted references.",
            how_to_fix="Add at least 3 inline links to high-authority sources (.gov, .edu, .org, peer-reviewed research) that support your main claims.",
            priority=Priority.HIGH,
        ),
    ),
]


def _parse_date(value: str) -> datetime | None:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_authority_host(host: str) -> bool:
    host = host.lower().split(":")[0]
    return any(host.endswith(suffix) for suffix in AUTHORITY_DOMAINS)


class PageLevelEEATAnalyzer(PageAnalyzer):
    """
    Scores experience, expertise, authoritativeness and trust signals
    visible on the page itself.
    """

    CATEGORIES = {
        "experience": 25,
        "expertise": 25,
        "authoritativeness": 25,
        "trustworthiness": 25,
    }

    @property
    def name(self) -> str:
        return "pageLevelEEAT"

    @property
    def label(self) -> str:
        return "E-E-A-T"

    def analyze(
        self,
        soup: BeautifulSoup,
        url: str,
        target_keywords: list[str] | None = None,
    ) -> AnalyzerResult:
        findings = self.new_findings()
        recommendations: list[Recommendation] = []
        content = main_content_text(soup)

        self._check_experience(soup, content, findings["experience"], recommendations)
        self._check_expertise(soup, content, findings["expertise"], recommendations)
        self._check_authoritativeness(soup, url, findings["authoritativeness"], recommendations)
        self._check_trustworthiness(soup, url, content, findings["trustworthiness"], recommendations)

        return self.build_result(findings, recommendations)

    def _check_experience(self, soup, content, category, recommendations) -> None:
        experience_count = count_pattern_matches(content, EXPERIENCE_PATTERNS)
        category.details["experienceIndicators"] = experience_count
        score_bands(category, experience_count, EXPERIENCE_BANDS, recommendations)

        images = count_elements(soup, "img")
        figures = count_elements(soup, "figure")
        category.details["mediaCount"] = images + figures

        if images >= 3 or figures >= 1:
            category.add(10)
        elif images > 0:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Add original images or screenshots to demonstrate hands-on experience",
                    why=f"You have {images} image(s). Three or more original visuals (screenshots, photos, charts of real data) prove you actually did what you describe.",
                    how_to_fix="Add screenshots from your testing, photos of real products or processes and charts of your results. Wrap them in <figure> with a descriptive <figcaption>.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add visual evidence (photos, screenshots, charts) of your experience",
                    why="The page has no images or figures, so there is no visual proof of first-hand experience.",
                    how_to_fix="Add at least 3 original images that document your experience, each with descriptive alt text, inside <figure> elements with captions.",
                    priority=Priority.HIGH,
                )
            )

    def _check_expertise(self, soup, content, category, recommendations) -> None:
        has_author_schema = has_schema_type(soup, "Person")
        author_meta = get_meta_content(soup, "author") or get_meta_content(soup, "article:author")
        byline = "".join(
            el.get_text() for el in soup.select('[rel="author"], .author, .byline')
        ).strip()

        category.details["hasAuthorSchema"] = has_author_schema
        category.details["hasAuthorInfo"] = has_author_schema or bool(author_meta) or bool(byline)
        category.details["authorName"] = author_meta or byline[:100]

        if has_author_schema:
            category.add(15)
        elif author_meta or byline:
            category.add(10)
            recommendations.append(
                Recommendation(
                    text="Add Person schema markup for author to strengthen expertise signals",
                    why=f"You show author information ({(author_meta or byline)[:50]}) but no Person schema, so the author's identity and credentials are not machine-readable.",
                    how_to_fix='Add Person JSON-LD with name, url (author bio page), jobTitle, affiliation and sameAs (social profiles), and reference it from the article\'s "author" property.',
                    priority=Priority.HIGH,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add clear author attribution - AI engines heavily weight author credentials",
                    why="The page has no visible author attribution. Engines need to know who wrote content to judge its expertise, especially on Your Money or Your Life topics.",
                    how_to_fix="Add a visible byline with the author's full name linking to a bio page with credentials, then add Person schema for that author.",
                    priority=Priority.CRITICAL,
                )
            )

        credentials = count_pattern_matches(content, CREDENTIAL_PATTERNS)
        category.details["credentialMentions"] = credentials
        score_bands(category, credentials, CREDENTIAL_BANDS, recommendations)

    def _check_authoritativeness(self, soup, url, category, recommendations) -> None:
        page_host = link_host(url).lower().split(":")[0]
        external_hosts = []
        for link in soup.find_all("a", href=True):
            href = link.get("href", "").strip()
            if not href.startswith("http"):
                continue
            if page_host and page_host in href:
                continue
            host = link_host(href)
            if host:
                external_hosts.append(host)

        authority_links = sum(1 for host in external_hosts if is_authority_host(host))
        category.details["externalLinks"] = len(external_hosts)
        category.details["authorityLinks"] = authority_links
        score_bands(category, authority_links, AUTHORITY_LINK_BANDS, recommendations)

        raw_date = (
            get_meta_content(soup, "article:modified_time")
            or get_meta_content(soup, "dateModified")
            or self._time_datetime(soup)
        )
        category.details["lastUpdated"] = raw_date or "Not specified"
        modified = _parse_date(raw_date)

        if modified is None:
            category.details["monthsSinceUpdate"] = None
            recommendations.append(
                Recommendation(
                    text="Add dateModified metadata to show content freshness",
                    why="The page has no machine-readable last-updated date. Engines cannot tell whether the content is current and may prefer sources with clear freshness signals.",
                    how_to_fix='Add <meta property="article:modified_time" content="YYYY-MM-DD">, a "dateModified" property in your JSON-LD and a visible "Last updated" line. Update them whenever the content changes.',
                    priority=Priority.MEDIUM,
                )
            )
            return

        age_days = (datetime.now(timezone.utc) - modified).total_seconds() / 86400
        months_old = age_days / DAYS_PER_MONTH
        rounded_months = round_half_up(months_old)
        category.details["monthsSinceUpdate"] = rounded_months

        if months_old <= 6:
            category.add(10)
        elif months_old <= 12:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Content is over 6 months old - consider updating with recent information",
                    why=f"The content was last updated {rounded_months} months ago. Engines favour fresh content, and material older than 6 months may contain outdated facts.",
                    how_to_fix="Refresh statistics, examples and developments from the last few months, then update the dateModified metadata and the visible last-updated date.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Content is outdated - update with current data and mark with new dateModified",
                    why=f"The content was last updated {rounded_months} months ago, over a year. Engines may skip it in favour of newer sources.",
                    how_to_fix="Replace old statistics, verify every fact, refresh examples and sections, then set dateModified to the current date and show it on the page.",
                    priority=Priority.HIGH,
                )
            )

    @staticmethod
    def _time_datetime(soup: BeautifulSoup) -> str:
        time_tag = soup.find("time", attrs={"datetime": True})
        return (time_tag.get("datetime") or "").strip() if time_tag else ""

    def _check_trustworthiness(self, soup, url, content, category, recommendations) -> None:
        is_secure = url.lower().startswith("https://")
        category.details["isSecure"] = is_secure

        if is_secure:
            category.add(10)
        else:
            recommendations.append(
                Recommendation(
                    text="Use HTTPS for security and trust signals",
                    why='The page is served over HTTP. Browsers flag it as "Not Secure" and engines treat it as a basic trust failure.',
                    how_to_fix="Install a TLS certificate (Let's Encrypt is free), 301-redirect HTTP to HTTPS and update internal links to https://.",
                    priority=Priority.CRITICAL,
                )
            )

        has_contact_info = (
            has_element(soup, 'a[href^="mailto:"]')
            or "contact" in content.lower()
            or has_element(soup, "address")
        )
        category.details["hasContactInfo"] = has_contact_info

        if has_contact_info:
            category.add(8)
        else:
            recommendations.append(
                Recommendation(
                    text="Add contact information to build trust with users and AI engines",
                    why="The page shows no contact information. Being reachable shows a real person or organisation stands behind the content.",
                    how_to_fix="Add a mailto: link in the footer, a Contact page in the navigation and, where relevant, a physical address in an <address> element.",
                    priority=Priority.HIGH,
                )
            )

        has_policy_links = has_element(soup, 'a[href*="privacy"], a[href*="terms"]')
        category.details["hasPrivacyPolicy"] = has_policy_links

        if has_policy_links:
            category.add(7)
        else:
            recommendations.append(
                Recommendation(
                    text="Link to privacy policy and terms of service",
                    why="The page links to no privacy policy or terms of service. These pages show the site operates transparently.",
                    how_to_fix="Publish a privacy policy and terms of service and link to both from the footer of every page.",
                    priority=Priority.MEDIUM,
                )
            )
