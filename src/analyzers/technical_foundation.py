"""Technical foundation analyzer: schema markup, crawlability, HTML structure."""

import logging

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerResult, PageAnalyzer
from analyzers.utils import (
    count_elements,
    extract_structured_data,
    extract_text,
    get_meta_content,
    link_host,
    schema_types,
)
from recommendations.engine import Priority, Recommendation

logger = logging.getLogger(__name__)

VALUABLE_SCHEMA_TYPES = {
    "Article",
    "NewsArticle",
    "BlogPosting",
    "Product",
    "Organization",
    "Person",
    "FAQPage",
    "HowTo",
}

SKIPPED_LINK_SCHEMES = ("mailto:", "tel:", "javascript:", "#")


class TechnicalFoundationAnalyzer(PageAnalyzer):
    """
    Checks the machine-readable foundation of a page.

    Checks:
    - JSON-LD structured data, high-value types, authorship markup
    - Indexability, canonical URL, internal links
    - Title, meta description, heading structure
    """

    CATEGORIES = {
        "schemaMarkup": 40,
        "crawlability": 30,
        "htmlStructure": 30,
    }

    @property
    def name(self) -> str:
        return "technicalFoundation"

    @property
    def label(self) -> str:
        return "Technical Foundation"

    def analyze(
        self,
        soup: BeautifulSoup,
        url: str,
        target_keywords: list[str] | None = None,
    ) -> AnalyzerResult:
        findings = self.new_findings()
        recommendations: list[Recommendation] = []

        self._check_schema(soup, findings["schemaMarkup"], recommendations)
        self._check_crawlability(soup, url, findings["crawlability"], recommendations)
        self._check_html_structure(soup, findings["htmlStructure"], recommendations)

        return self.build_result(findings, recommendations)

    def _check_schema(self, soup, category, recommendations) -> None:
        """Structured data presence, value and authorship (40 points)."""
        items = extract_structured_data(soup)
        types = schema_types(items)

        category.details["hasStructuredData"] = len(items) > 0
        category.details["count"] = len(items)
        category.details["types"] = types

        if not items:
            recommendations.append(
                Recommendation(
                    text="Add structured data (JSON-LD) to help AI engines understand your content",
                    why="No JSON-LD structured data was found. Structured data is the most direct way to tell AI engines what your page is about, who wrote it and what it contains. Without it, answer engines have to guess.",
                    how_to_fix="Add a <script type=\"application/ld+json\"> block to the <head> describing the page (Article, Product, FAQPage or HowTo) plus the Organization or Person behind it. Validate it with the Schema.org validator or Google's Rich Results Test.",
                    priority=Priority.CRITICAL,
                )
            )
            return

        category.add(20)

        has_valuable_type = any(t in VALUABLE_SCHEMA_TYPES for t in types)
        category.details["hasValuableType"] = has_valuable_type
        if has_valuable_type:
            category.add(15)
        else:
            recommendations.append(
                Recommendation(
                    text="Add high-value schema types like Article, Product, FAQPage, or HowTo",
                    why=f"Your structured data only declares {', '.join(types) or 'no @type'}. High-value types give AI engines explicit, extractable facts, so the model does not have to interpret your content to cite it.",
                    how_to_fix="Declare the schema type that matches the page: Article/BlogPosting for editorial content, Product for product pages, FAQPage for Q&A and HowTo for instructions. Fill in the required properties for that type.",
                    priority=Priority.HIGH,
                )
            )

        has_authorship = "Person" in types or "Organization" in types
        category.details["hasAuthorshipMarkup"] = has_authorship
        if has_authorship:
            category.add(5)
        else:
            recommendations.append(
                Recommendation(
                    text="Add Person or Organization schema to establish authorship",
                    why="Nothing in your structured data says who is behind the content. AI engines use Person and Organization entities to judge whether a source is credible enough to cite.",
                    how_to_fix="Add an Organization entity (name, url, logo, sameAs) and, for authored content, a Person entity (name, jobTitle, url) referenced from the article's author property.",
                    priority=Priority.MEDIUM,
                )
            )

    def _check_crawlability(self, soup, url, category, recommendations) -> None:
        """Indexability, canonical URL and internal linking (30 points)."""
        meta_robots = get_meta_content(soup, "robots")
        is_indexable = "noindex" not in meta_robots.lower()

        category.details["metaRobots"] = meta_robots or "Not specified"
        category.details["isIndexable"] = is_indexable

        if is_indexable:
            category.add(15)
        else:
            recommendations.append(
                Recommendation(
                    text='Remove "noindex" directive to allow AI engines to index this page',
                    why=f'Your robots meta tag is "{meta_robots}". A noindex directive tells every crawler, including AI answer engines, to leave this page out entirely. It cannot be cited at all.',
                    how_to_fix='Remove "noindex" from <meta name="robots"> (and from any X-Robots-Tag header) unless the page is intentionally private.',
                    priority=Priority.CRITICAL,
                )
            )

        canonical_tag = soup.find("link", attrs={"rel": "canonical"})
        canonical = (canonical_tag.get("href") or "").strip() if canonical_tag else ""
        category.details["hasCanonical"] = bool(canonical)
        category.details["canonicalUrl"] = canonical

        if canonical:
            category.add(10)
        else:
            recommendations.append(
                Recommendation(
                    text="Add canonical URL to prevent duplicate content issues",
                    why="No canonical URL is declared. When the same content is reachable under several URLs, AI engines may split signals between them or cite a duplicate instead of your preferred page.",
                    how_to_fix='Add <link rel="canonical" href="https://yourdomain.com/this-page"> to the <head>, pointing at the preferred URL for this content.',
                    priority=Priority.HIGH,
                )
            )

        internal, external = self._count_links(soup, url)
        category.details["internalLinks"] = internal
        category.details["externalLinks"] = external

        if internal > 0:
            category.add(5)
        else:
            recommendations.append(
                Recommendation(
                    text="Add internal links to improve site structure and crawlability",
                    why="This page has no internal links. Crawlers discover and contextualise pages through links; an isolated page is harder to find and carries less topical authority.",
                    how_to_fix="Link to 3-5 related pages on your site using descriptive anchor text, and make sure navigation links are plain <a href> elements rather than script-driven.",
                    priority=Priority.MEDIUM,
                )
            )

    def _count_links(self, soup: BeautifulSoup, page_url: str) -> tuple[int, int]:
        """Count internal and external links."""
        page_domain = link_host(page_url)
        internal = 0
        external = 0

        for link in soup.find_all("a", href=True):
            href = link.get("href", "").strip()
            if not href or href.startswith(SKIPPED_LINK_SCHEMES):
                continue

            # Malformed targets resolve to no host and are skipped
            link_domain = link_host(href, page_url)
            if not link_domain:
                continue
            if link_domain == page_domain:
                internal += 1
            else:
                external += 1

        return internal, external

    def _check_html_structure(self, soup, category, recommendations) -> None:
        """Title, meta description and heading outline (30 points)."""
        title = extract_text(soup, "title")
        category.details["title"] = title
        category.details["titleLength"] = len(title)

        if title and 30 <= len(title) <= 60:
            category.add(10)
        elif title:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Optimize title tag length (30-60 characters optimal for AI summaries)",
                    why=f"Your title is {len(title)} characters. Titles outside 30-60 characters are either too vague to describe the page or get truncated when engines quote them.",
                    how_to_fix="Rewrite the title to 30-60 characters, leading with the main topic or question the page answers.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add a descriptive title tag",
                    why="The page has no <title>. The title is the first signal engines use to decide what a page is about and how to label it when citing it.",
                    how_to_fix="Add a unique <title> of 30-60 characters that states the page's main topic.",
                    priority=Priority.CRITICAL,
                )
            )

        description = get_meta_content(soup, "description")
        category.details["metaDescription"] = description
        category.details["descriptionLength"] = len(description)

        if description and 120 <= len(description) <= 160:
            category.add(10)
        elif description:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Optimize meta description length (120-160 characters for better AI summaries)",
                    why=f"Your meta description is {len(description)} characters. Descriptions between 120 and 160 characters give engines a complete summary they can reuse without truncation.",
                    how_to_fix="Rewrite the meta description to 120-160 characters summarising the direct answer or value the page provides.",
                    priority=Priority.MEDIUM,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add meta description to provide context for AI engines",
                    why="The page has no meta description. Engines fall back to guessing a summary from body text, which is often a navigation fragment or cookie notice.",
                    how_to_fix='Add <meta name="description" content="..."> with a 120-160 character summary of the page.',
                    priority=Priority.HIGH,
                )
            )

        h1_count = count_elements(soup, "h1")
        h2_count = count_elements(soup, "h2")
        category.details["headings"] = {"h1": h1_count, "h2": h2_count}

        if h1_count == 1 and h2_count > 0:
            category.add(10)
        elif h1_count == 1:
            category.add(5)
            recommendations.append(
                Recommendation(
                    text="Add H2 subheadings to improve content structure and scanability",
                    why="The page has an H1 but no H2 subheadings. Subheadings split content into sections that engines can match to individual questions.",
                    how_to_fix="Break the content into sections with descriptive H2 headings, ideally phrased the way users ask about the topic.",
                    priority=Priority.MEDIUM,
                )
            )
        elif h1_count > 1:
            category.add(3)
            recommendations.append(
                Recommendation(
                    text="Use only one H1 tag per page for better semantic structure",
                    why=f"The page has {h1_count} H1 headings. Multiple H1s blur what the page's main topic is.",
                    how_to_fix="Keep a single H1 for the page topic and demote the others to H2 or H3.",
                    priority=Priority.HIGH,
                )
            )
        else:
            recommendations.append(
                Recommendation(
                    text="Add an H1 heading to establish page topic",
                    why="The page has no H1 heading, so there is no explicit statement of its main topic in the document outline.",
                    how_to_fix="Add one H1 at the top of the main content that names the topic or question the page answers.",
                    priority=Priority.CRITICAL,
                )
            )
