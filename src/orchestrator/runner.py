"""Complete analysis run: fetch once, fan out to the analyzers, merge."""

import logging
import re
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from datetime import datetime, timezone

from analyzers import PAGE_ANALYZERS, AnalyzerResult, SiteLevelEEATAnalyzer
from config import settings
from fetcher import FetchError, FetchedPage, fetch_page
from orchestrator.scoring import WEIGHTS, compute_overall_score, overall_grade
from recommendations.engine import merge_recommendations

logger = logging.getLogger(__name__)

EXPLICIT_SCHEME = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*)://")


class AnalysisInputError(ValueError):
    """Raised for a URL or keyword list that cannot be analyzed."""


def normalize_url(url) -> str:
    if not isinstance(url, str) or not url.strip():
        raise AnalysisInputError("URL is required")
    url = url.strip()
    scheme = EXPLICIT_SCHEME.match(url)
    if scheme is None:
        return "https://" + url
    if scheme.group(1).lower() not in ("http", "https"):
        raise AnalysisInputError(f"Unsupported URL scheme: {scheme.group(1)}")
    return url


def normalize_keywords(keywords) -> list[str]:
    if keywords is None:
        return []
    if isinstance(keywords, str) or not all(isinstance(k, str) for k in keywords):
        raise AnalysisInputError("Target keywords must be a list of strings")

    cleaned = [k.strip() for k in keywords]
    if any(not k for k in cleaned):
        raise AnalysisInputError("Target keywords must not be blank")
    return cleaned


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_result(url, message: str, fetch_error: FetchError | None = None) -> dict:
    result = {
        "success": False,
        "error": message,
        "url": url,
        "timestamp": _timestamp(),
    }
    detection = fetch_error.block_detection if fetch_error else None
    if detection is not None and detection.is_blocked:
        result["blockDetection"] = detection.to_dict()
    return result


def _run_site_level(site_analyzer: SiteLevelEEATAnalyzer, url: str) -> AnalyzerResult | None:
    try:
        return site_analyzer.analyze(url)
    except Exception as e:
        logger.warning(f"Site-level analysis failed for {url}: {e}")
        return None


class AnalysisRunner:
    """
    Runs the page analyzers (and optionally the site-level analyzer)
    over one fetched page.

    Args:
        fetcher: Callable returning a FetchedPage for a URL
        site_analyzer: Site-level analyzer, or None to skip it
        concurrent: Fan out on a thread pool; False runs everything
            in order on the calling thread with identical results
    """

    def __init__(
        self,
        fetcher: Callable[[str], FetchedPage] = fetch_page,
        site_analyzer: SiteLevelEEATAnalyzer | None = None,
        concurrent: bool = True,
        analyzers=None,
    ):
        self.fetcher = fetcher
        self.site_analyzer = site_analyzer
        self.concurrent = concurrent
        self.analyzers = [cls() for cls in PAGE_ANALYZERS] if analyzers is None else analyzers

    def run(self, url, target_keywords=None) -> dict:
        started = time.perf_counter()

        try:
            url = normalize_url(url)
            keywords = normalize_keywords(target_keywords)
        except AnalysisInputError as e:
            return error_result(url, str(e))

        logger.info(f"Analyzing {url} ({len(keywords)} target keywords)")

        try:
            page = self.fetcher(url)
            if self.concurrent:
                results, site_result = self._run_concurrent(page, url, keywords)
            else:
                results, site_result = self._run_sequential(page, url, keywords)
            document = self._build_document(url, keywords, results, site_result)
        except FetchError as e:
            logger.warning(f"Fetch failed for {url}: {e.message}")
            return error_result(url, e.message, e)
        except Exception as e:
            logger.exception(f"Analysis failed for {url}: {e}")
            return error_result(url, str(e))

        document["processingTime"] = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"Analysis of {url} finished: {document['overallScore']} "
            f"({document['overallGrade']}) in {document['processingTime']}ms"
        )
        return document

    def _run_sequential(self, page, url, keywords):
        results = {
            analyzer.name: analyzer.analyze(page.soup, url, keywords)
            for analyzer in self.analyzers
        }
        site_result = None
        if self.site_analyzer is not None:
            site_result = _run_site_level(self.site_analyzer, url)
        return results, site_result

    def _run_concurrent(self, page, url, keywords):
        executor = ThreadPoolExecutor(
            max_workers=settings.analyzer_workers, thread_name_prefix="analyzer"
        )
        try:
            site_future = None
            if self.site_analyzer is not None:
                site_future = executor.submit(_run_site_level, self.site_analyzer, url)

            futures = {
                analyzer.name: executor.submit(analyzer.analyze, page.soup, url, keywords)
                for analyzer in self.analyzers
            }
            # Collected by name, so completion order does not matter
            results = {name: future.result() for name, future in futures.items()}

            site_result = None
            if site_future is not None:
                try:
                    site_result = site_future.result(timeout=settings.site_level_timeout)
                except FuturesTimeout:
                    logger.warning(
                        f"Site-level analysis for {url} timed out after "
                        f"{settings.site_level_timeout}s"
                    )
            return results, site_result
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _build_document(self, url, keywords, results, site_result) -> dict:
        overall = compute_overall_score({name: r.score for name, r in results.items()})

        groups = [
            (analyzer.label, results[analyzer.name].recommendations)
            for analyzer in self.analyzers
        ]
        if site_result is not None and self.site_analyzer is not None:
            groups.append((self.site_analyzer.label, site_result.recommendations))
        merged = merge_recommendations(groups, limit=settings.max_recommendations)

        analyzers = {name: result.to_dict() for name, result in results.items()}
        analyzers["siteLevelEEAT"] = site_result.to_dict() if site_result is not None else None

        return {
            "success": True,
            "url": url,
            "targetKeywords": keywords,
            "overallScore": overall,
            "overallGrade": overall_grade(overall),
            "analyzers": analyzers,
            "recommendations": [r.to_dict() for r in merged],
            "weights": dict(WEIGHTS),
            "blockDetection": None,
            "timestamp": _timestamp(),
        }


def run_complete_analysis(
    url,
    target_keywords=None,
    *,
    fetcher: Callable[[str], FetchedPage] = fetch_page,
    site_analyzer: SiteLevelEEATAnalyzer | None = None,
    concurrent: bool = True,
) -> dict:
    """
    Analyze one page and return the overall result document.

    Never raises: invalid input, fetch failures and unexpected errors
    all come back as `{"success": False, "error": ...}`.

    Args:
        url: Page URL; https:// is assumed when no scheme is given
        target_keywords: Optional keywords for the Query Match analyzer
        fetcher: Page fetcher, defaults to a live HTTP fetch
        site_analyzer: Site-level analyzer; when omitted one is created
            if `settings.site_level_enabled` is set
        concurrent: Run analyzers on a thread pool
    """
    if site_analyzer is None and settings.site_level_enabled:
        site_analyzer = SiteLevelEEATAnalyzer()

    runner = AnalysisRunner(
        fetcher=fetcher,
        site_analyzer=site_analyzer,
        concurrent=concurrent,
    )
    return runner.run(url, target_keywords)
