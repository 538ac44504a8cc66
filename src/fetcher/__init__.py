from fetcher.blocking import BlockDetection, detect_bot_blocking
from fetcher.client import FetchError, FetchedPage, build_client, fetch_page, probe_url

__all__ = [
    "BlockDetection",
    "FetchError",
    "FetchedPage",
    "build_client",
    "detect_bot_blocking",
    "fetch_page",
    "probe_url",
]
