"""Bot and crawler blocking classification for fetch responses and transport errors."""

from dataclasses import dataclass, field

import httpx

CHALLENGE_PHRASES = ("verify you are human", "verify you're human", "i'm not a robot", "are you a robot", "prove you are human")
DENIAL_PHRASES = ("access denied", "you have been blocked", "request blocked")

# Markers of Cloudflare's challenge interstitial, not the bare word "challenge"
CLOUDFLARE_CHALLENGE_MARKERS = ("cf-challenge", "challenge-platform", "cf_chl_", "checking your browser")

# Substrings of connect errors raised when the server refuses the connection
REFUSED_MARKERS = ("connection refused", "errno 111", "errno 61", "actively refused")


@dataclass
class BlockDetection:
    """Outcome of blocking classification. Later matches overwrite the label fields."""

    is_blocked: bool = False
    block_type: str | None = None
    evidence: list[str] = field(default_factory=list)
    recommendation: str = ""
    aeo_impact: str = ""

    def flag(self, block_type: str, evidence: str, recommendation: str, aeo_impact: str) -> None:
        self.is_blocked = True
        self.block_type = block_type
        self.evidence.append(evidence)
        self.recommendation = recommendation
        self.aeo_impact = aeo_impact

    def to_dict(self) -> dict:
        return {
            "isBlocked": self.is_blocked,
            "blockType": self.block_type,
            "evidence": list(self.evidence),
            "recommendation": self.recommendation,
            "aeoImpact": self.aeo_impact,
        }


def _check_status(detection: BlockDetection, status: int) -> None:
    if status == 403:
        detection.flag(
            "HTTP 403 Forbidden",
            "Server returned 403 Forbidden - access denied",
            "Check robots.txt and ensure your site allows AI crawlers",
            "CRITICAL: AI search engines are likely being blocked from accessing your content",
        )
    elif status == 429:
        detection.flag(
            "Rate Limiting",
            "Server returned 429 Too Many Requests",
            "Adjust rate limiting rules to allow legitimate AI crawlers",
            "HIGH: Aggressive rate limiting may prevent AI engines from fully indexing your content",
        )
    elif status == 503:
        detection.flag(
            "Service Unavailable / WAF",
            "Server returned 503 Service Unavailable",
            "Check if WAF/CDN is blocking automated requests",
            "HIGH: Web Application Firewall may be blocking AI crawlers",
        )


def _check_body(detection: BlockDetection, body: str) -> None:
    html = body.lower()

    if "cloudflare" in html and any(marker in html for marker in CLOUDFLARE_CHALLENGE_MARKERS):
        detection.flag(
            "Cloudflare Bot Challenge",
            "Cloudflare bot challenge page detected",
            "Configure Cloudflare to allow verified AI crawlers (ChatGPT, Perplexity, etc.)",
            "CRITICAL: Cloudflare is blocking AI search engines with JavaScript challenges",
        )

    if "incapsula" in html or "imperva" in html:
        detection.flag(
            "Imperva/Incapsula WAF",
            "Imperva/Incapsula WAF detected",
            "Whitelist AI crawler IPs in Imperva/Incapsula settings",
            "CRITICAL: WAF is blocking AI search engine crawlers",
        )

    if "recaptcha" in html and any(phrase in html for phrase in CHALLENGE_PHRASES):
        detection.flag(
            "reCAPTCHA Challenge",
            "Google reCAPTCHA challenge detected",
            "Implement selective reCAPTCHA that doesn't block AI crawlers",
            "CRITICAL: reCAPTCHA prevents AI engines from accessing content",
        )

    if any(phrase in html for phrase in DENIAL_PHRASES):
        detection.flag(
            "Access Denied Page",
            "Generic access denied message detected in page content",
            "Review server security rules and allow legitimate crawlers",
            "HIGH: Generic blocking may affect AI crawler access",
        )


def _check_error(detection: BlockDetection, error: Exception) -> None:
    if isinstance(error, httpx.TimeoutException):
        detection.flag(
            "Connection Timeout",
            "Request timed out before the server responded",
            "Server response time may be too slow or deliberately throttled for bots",
            "MEDIUM: Slow response times may cause AI crawlers to give up before indexing",
        )
    elif isinstance(error, httpx.ConnectError) and is_refused(error):
        detection.flag(
            "Connection Refused",
            "Server actively refused connection",
            "Firewall or security software may be blocking automated requests",
            "HIGH: Firewall rules may be blocking AI crawler IPs",
        )
    elif isinstance(error, (httpx.RemoteProtocolError, httpx.ReadError)):
        detection.flag(
            "No Response / Silent Drop",
            "Server did not respond at all (possible IP blocking)",
            "Check IP allowlists and ensure AI crawler IPs aren't blocked",
            "CRITICAL: IP-based blocking is preventing all AI crawler access",
        )


def is_refused(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in REFUSED_MARKERS)


def detect_bot_blocking(
    response: httpx.Response | None = None,
    error: Exception | None = None,
) -> BlockDetection:
    """
    Classify a response and/or transport error as crawler blocking.

    Status codes are checked first, then body markers, then the error.
    Each match overwrites the label fields while evidence accumulates.
    """
    detection = BlockDetection()

    if response is not None:
        _check_status(detection, response.status_code)
        _check_body(detection, response.text or "")

    if error is not None:
        _check_error(detection, error)

    return detection
