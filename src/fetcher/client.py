"""Page fetching: one GET with a browser-like client, classified for crawler blocking."""

import logging
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

from config import settings
from fetcher.blocking import BlockDetection, detect_bot_blocking

logger = logging.getLogger(__name__)

DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "no address associated",
    "temporary failure in name resolution",
)


class FetchError(Exception):
    """Raised when a page cannot be fetched or is served a block page."""

    def __init__(self, message: str, block_detection: BlockDetection | None = None):
        super().__init__(message)
        self.message = message
        self.block_detection = block_detection


@dataclass
class FetchedPage:
    soup: BeautifulSoup
    html: str
    status_code: int
    url: str
    headers: dict
    redirected: bool
    block_detection: BlockDetection | None = None


def default_headers() -> dict:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }


def build_client(timeout: float | None = None) -> httpx.Client:
    """Client used for every outbound request of an analysis."""
    return httpx.Client(
        timeout=timeout if timeout is not None else settings.http_timeout,
        follow_redirects=True,
        max_redirects=settings.max_redirects,
        headers=default_headers(),
    )


def _error_message(error: Exception) -> str:
    detail = str(error)
    if isinstance(error, httpx.ConnectError) and any(
        marker in detail.lower() for marker in DNS_FAILURE_MARKERS
    ):
        return "Website not found. Please check the URL."
    if isinstance(error, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return "Invalid URL format. Please check the URL and try again."
    return f"Failed to fetch page: {detail}"


def _get(client: httpx.Client, url: str) -> httpx.Response:
    try:
        return client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        detection = detect_bot_blocking(error=e)
        if detection.is_blocked:
            logger.warning(f"Blocked fetching {url}: {detection.block_type}")
            raise FetchError(
                f"Bot/crawler blocking detected: {detection.block_type}", detection
            ) from e
        logger.error(f"Failed to fetch {url}: {e}")
        raise FetchError(_error_message(e), detection) from e


def fetch_page(url: str, *, client: httpx.Client | None = None) -> FetchedPage:
    """
    Fetch and parse a page.

    Args:
        url: Absolute URL to fetch
        client: Optional preconfigured client; one is created (and
            closed) per call when omitted

    Returns:
        FetchedPage with the parsed document

    Raises:
        FetchError: transport failure, HTTP error status, or a block page
    """
    if client is None:
        with build_client() as own_client:
            return fetch_page(url, client=own_client)

    response = _get(client, url)
    detection = detect_bot_blocking(response=response)

    if response.status_code >= 400:
        if detection.is_blocked:
            message = f"Bot/crawler blocking detected: {detection.block_type}"
        else:
            message = f"HTTP {response.status_code}: {response.reason_phrase}"
        logger.warning(f"Fetching {url} failed: {message}")
        raise FetchError(message, detection)

    if detection.is_blocked:
        logger.warning(f"Block page served for {url}: {detection.block_type}")
        raise FetchError(f"Bot/crawler blocking detected: {detection.block_type}", detection)

    html = response.text
    return FetchedPage(
        soup=BeautifulSoup(html, "lxml"),
        html=html,
        status_code=response.status_code,
        url=str(response.url),
        headers=dict(response.headers),
        redirected=bool(response.history),
    )


def probe_url(url: str, *, client: httpx.Client, timeout: float | None = None) -> bool:
    """HEAD request; True for a 2xx answer. Transport failures count as absent."""
    try:
        response = client.head(
            url, timeout=timeout if timeout is not None else settings.probe_timeout
        )
    except httpx.HTTPError as e:
        logger.debug(f"Probe failed for {url}: {e}")
        return False
    return response.is_success
