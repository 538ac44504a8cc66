"""Site-level E-E-A-T analyzer: domain-wide trust signals."""

import logging
import re
from urllib.parse import urlparse

import httpx

from analyzers.base import AnalyzerResult, BaseAnalyzer
from analyzers.utils import has_schema_type
from fetcher import build_client, fetch_page, probe_url
from recommendations.engine import Priority, Recommendation

logger = logging.getLogger(__name__)

# (path, display name); each page found is worth PAGE_POINTS
KEY_PAGES = [
    ("/about", "About Page"),
    ("/about-us", "About Us Page"),
    ("/contact", "Contact Page"),
    ("/privacy", "Privacy Policy"),
    ("/terms", "Terms of Service"),
]
PAGE_POINTS = 6
MIN_TRUST_PAGES = 3

EMAIL_PATTERN = re.compile(r"@[\w\-]+\.[\w]{2,}")
PHONE_PATTERN = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
AUTHOR_SELECTOR = '[itemtype*="Person"], .author, [rel="author"]'

AUTHORITY_PROVIDERS = {
    "mozDomainAuthority": {
        "available": False,
        "comingSoon": True,
        "provider": "Moz",
        "description": "0-100 scale measuring link authority",
        "learnMore": "https://moz.com/domain-analysis",
    },
    "ahrefsDomainRating": {
        "available": False,
        "comingSoon": True,
        "provider": "Ahrefs",
        "description": "0-100 scale measuring backlink strength",
        "learnMore": "https://ahrefs.com/domain-rating",
    },
    "semrushAuthorityScore": {
        "available": False,
        "comingSoon": True,
        "provider": "Semrush",
        "description": "0-100 scale measuring overall authority",
        "learnMore": "https://www.semrush.com/kb/840-authority-score",
    },
}


class SiteLevelEEATAnalyzer(BaseAnalyzer):
    """
    Evaluates trust signals for the whole site rather than one page.

    Unlike the page analyzers this one performs its own network calls:
    HEAD probes for well-known trust pages and a GET of the homepage.
    Any failure degrades to a score of 0 with one explanatory
    recommendation; nothing is raised.

    Authority metrics always score 0 and keep their 20-point budget
    reserved for third-party domain authority providers.
    """

    CATEGORIES = {
        "domainAge": 20,
        "siteStructure": 30,
        "trustSignals": 30,
        "authorityMetrics": 20,
    }

    @property
    def name(self) -> str:
        return "siteLevelEEAT"

    @property
    def label(self) -> str:
        return "Site-Level E-E-A-T"

    def analyze(self, url: str, client: httpx.Client | None = None) -> AnalyzerResult:
        """
        Score the site that `url` belongs to.

        Args:
            url: Any URL on the site; a missing scheme defaults to https
            client: Optional client used for probes and the homepage fetch
        """
        try:
            if client is None:
                with build_client() as own_client:
                    return self._analyze(url, own_client)
            return self._analyze(url, client)
        except Exception as e:
            logger.exception(f"Site-level E-E-A-T analysis failed for {url}: {e}")
            return AnalyzerResult(
                score=0,
                grade="F",
                # Partially scored categories are discarded with the score
                findings=self.new_findings(),
                recommendations=[
                    Recommendation(
                        text="Error analyzing site-level E-E-A-T",
                        why="The site-wide analysis could not be completed. This is usually caused by connectivity problems or access restrictions on the site.",
                        how_to_fix="Try again later. If the problem persists, check that the homepage is reachable by automated clients.",
                        priority=Priority.HIGH,
                    )
                ],
                extra_details={"error": str(e)},
            )

    def _analyze(self, url: str, client: httpx.Client) -> AnalyzerResult:
        findings = self.new_findings()
        if not url.startswith("http"):
            url = "https://" + url
        parsed = urlparse(url)
        if not parsed.netloc:
            raise ValueError(f"Invalid URL: {url}")
        base_url = f"{parsed.scheme}://{parsed.netloc}"

        recommendations: list[Recommendation] = []
        self._check_domain(url, findings["domainAge"], recommendations)
        self._check_site_structure(base_url, client, findings["siteStructure"], recommendations)
        self._check_trust_signals(base_url, client, findings["trustSignals"], recommendations)
        self._check_authority_metrics(findings["authorityMetrics"], recommendations)

        return self.build_result(findings, recommendations)

    def _check_domain(self, url, category, recommendations) -> None:
        has_ssl = url.startswith("https://")
        category.details["hasSSL"] = has_ssl

        if has_ssl:
            category.add(10)
        else:
            recommendations.append(
                Recommendation(
                    text="Enable HTTPS with a valid SSL certificate",
                    why="The site is served over HTTP. AI engines do not trust or cite insecure sites, and browsers warn visitors away from them.",
                    how_to_fix="Install a TLS certificate (most hosts offer free Let's Encrypt certificates), redirect all HTTP traffic to HTTPS and update internal links.",
                    priority=Priority.CRITICAL,
                )
            )

        # Domain age needs a WHOIS lookup; neutral points until then
        category.details["ageEstimate"] = "Requires WHOIS lookup"
        category.add(10)

    def _check_site_structure(self, base_url, client, category, recommendations) -> None:
        found = []
        for path, page_name in KEY_PAGES:
            if probe_url(f"{base_url}{path}", client=client):
                found.append(page_name)
                category.add(PAGE_POINTS)

        missing = [page_name for _, page_name in KEY_PAGES if page_name not in found]
        category.details["keyPagesFound"] = found
        category.details["missingPages"] = missing
        logger.debug(f"Trust pages on {base_url}: {len(found)}/{len(KEY_PAGES)}")

        if len(found) < MIN_TRUST_PAGES:
            recommendations.append(
                Recommendation(
                    text="Add critical trust pages (About, Contact, Privacy)",
                    why=f"Only {len(found)}/{len(KEY_PAGES)} trust pages were found. AI engines look for About, Contact and Privacy Policy pages to verify a site is legitimate.",
                    how_to_fix="Create /about (company or author info), /contact (email, phone, address), /privacy (data policy) and /terms (usage terms), and link them from the footer.",
                    priority=Priority.CRITICAL,
                )
            )
        elif missing:
            recommendations.append(
                Recommendation(
                    text="Complete your set of trust pages",
                    why=f"{len(found)}/{len(KEY_PAGES)} trust pages were found. Missing: {', '.join(missing)}.",
                    how_to_fix="Publish the missing pages at their conventional paths and link them from the site footer.",
                    priority=Priority.MEDIUM,
                )
            )

    def _check_trust_signals(self, base_url, client, category, recommendations) -> None:
        page = fetch_page(base_url, client=client)
        soup = page.soup

        has_org_schema = has_schema_type(soup, "Organization")
        category.details["hasOrganizationSchema"] = has_org_schema

        if has_org_schema:
            category.add(10)
        else:
            recommendations.append(
                Recommendation(
                    text="Add Organization schema markup to homepage",
                    why="The homepage has no Organization schema, so engines cannot verify the business identity, location or contact details behind the site.",
                    how_to_fix="Add Organization JSON-LD to the homepage with name, url, logo, contactPoint and sameAs (social profiles), then validate it.",
                    priority=Priority.HIGH,
                )
            )

        body = soup.body.get_text().lower() if soup.body else ""
        has_email = bool(EMAIL_PATTERN.search(body))
        has_phone = bool(PHONE_PATTERN.search(body))
        category.details["hasVisibleEmail"] = has_email
        category.details["hasVisiblePhone"] = has_phone

        if has_email:
            category.add(5)
        else:
            recommendations.append(
                Recommendation(
                    text="Display contact email prominently",
                    why="No email address is visible on the homepage. Hidden contact details are a common trait of low-quality sites.",
                    how_to_fix="Show a business email on your own domain (e.g. info@yourdomain.com) in the footer and on the About and Contact pages.",
                    priority=Priority.HIGH,
                )
            )

        if has_phone:
            category.add(5)
        else:
            recommendations.append(
                Recommendation(
                    text="Display a contact phone number",
                    why="No phone number is visible on the homepage. A reachable phone line is a strong signal that a real organisation runs the site.",
                    how_to_fix="Add a phone number to the footer and Contact page, and include it as telephone in your Organization schema.",
                    priority=Priority.MEDIUM,
                )
            )

        has_author_bios = soup.select_one(AUTHOR_SELECTOR) is not None
        category.details["hasAuthorBios"] = has_author_bios

        if has_author_bios:
            category.add(10)
        else:
            recommendations.append(
                Recommendation(
                    text="Add author bios with credentials",
                    why="No author information was found. AI engines prioritise content from identifiable experts over anonymous content.",
                    how_to_fix="Create author profile pages with full name, credentials, photo and social links, and link article bylines to them.",
                    priority=Priority.MEDIUM,
                )
            )

    def _check_authority_metrics(self, category, recommendations) -> None:
        category.details["status"] = "Coming Soon"
        category.details["providers"] = {k: dict(v) for k, v in AUTHORITY_PROVIDERS.items()}
        recommendations.append(
            Recommendation(
                text="External Authority Metrics - Available Soon",
                why="Domain authority metrics from Moz, Ahrefs and Semrush provide third-party validation. These scores are not integrated yet, so this category scores 0.",
                how_to_fix="Check your scores directly with the providers listed in the details until the integrations are available.",
                priority=Priority.LOW,
            )
        )
