"""Client for the Firecrawl scraping API (the primary page source).

Every failure, whether transport, timeout, HTTP status or an unexpected
payload, surfaces as :class:`UpstreamError` so the clone service can fall
back to a direct fetch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from sitecloner.config import settings
from sitecloner.scraper.errors import ConfigurationError, UpstreamError
from sitecloner.scraper.models import ScrapeResult

logger = logging.getLogger(__name__)


@dataclass
class CreditUsage:
    """Remaining scraping credits for the configured account."""

    remaining_credits: int
    plan_credits: int
    billing_period_end: Optional[str] = None

    @property
    def used(self) -> int:
        return self.plan_credits - self.remaining_credits

    @property
    def percentage(self) -> int:
        if self.plan_credits <= 0:
            return 0
        return round(self.used / self.plan_credits * 100)


@dataclass
class CrawlStatus:
    """Progress of an asynchronous crawl job."""

    status: str
    completed: int = 0
    total: int = 0
    pages: Optional[List[Dict[str, Any]]] = None

    @property
    def is_finished(self) -> bool:
        return self.status in ("completed", "failed")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of an error string from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text[:200]


def _parse_scrape(url: str, payload: Dict[str, Any]) -> ScrapeResult:
    data = payload.get("data")
    if not isinstance(data, dict):
        data = {}

    html = data.get("html") or data.get("rawHtml")
    if isinstance(html, str) and html.strip():
        return ScrapeResult(url=url, html=html)

    # Markdown lives under "markdown" on v1 and "content" on the legacy API.
    markdown = data.get("markdown") or data.get("content") or payload.get("markdown")
    if isinstance(markdown, str) and markdown.strip():
        return ScrapeResult(url=url, markdown=markdown)

    raise UpstreamError("No HTML content received from scraping API")


def join_crawl_pages(pages: Sequence[Dict[str, Any]]) -> Tuple[str, int]:
    """Concatenate the markdown of crawled *pages* with page separators.

    Returns:
        ``(content, page_count)``; pages without markdown are counted but
        contribute no text.
    """
    chunks: List[str] = []
    for index, page in enumerate(pages, start=1):
        markdown = page.get("markdown")
        if not markdown:
            continue
        metadata = page.get("metadata") or {}
        source = metadata.get("sourceURL") or page.get("url") or "Unknown URL"
        chunks.append(f"\n\n--- PAGE {index}: {source} ---\n\n{markdown}")
    return "".join(chunks), len(pages)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class FirecrawlClient:
    """Thin synchronous wrapper over the Firecrawl REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.firecrawl.dev",
        timeout: float = 45.0,
        wait_for_ms: int = 3000,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.wait_for_ms = wait_for_ms

    @classmethod
    def from_settings(cls) -> "FirecrawlClient":
        return cls(
            api_key=settings.firecrawl_api_key,
            base_url=settings.firecrawl_base_url,
            timeout=settings.scrape_timeout,
            wait_for_ms=settings.scrape_wait_for_ms,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        if not self.api_key:
            raise ConfigurationError("FIRECRAWL_API_KEY is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            with httpx.Client(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            ) as client:
                response = client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"Scraping API timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Scraping API request failed: {exc}") from exc

        if response.is_error:
            raise UpstreamError(
                f"Scraping API returned HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Scraping API returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("Unrecognized response shape from scraping API")
        return payload

    def scrape(
        self,
        url: str,
        formats: Sequence[str] = ("html",),
        only_main_content: bool = False,
    ) -> ScrapeResult:
        """Scrape a single page.

        Raises:
            UpstreamError: On any transport, status or payload problem.
            ConfigurationError: If no API key is configured.
        """
        logger.info("Scraping via Firecrawl", extra={"url": url, "formats": list(formats)})
        payload = self._request(
            "POST",
            "/v1/scrape",
            json={
                "url": url,
                "formats": list(formats),
                "onlyMainContent": only_main_content,
                "waitFor": self.wait_for_ms,
            },
        )
        return _parse_scrape(url, payload)

    def start_crawl(self, url: str, limit: int = 1) -> str:
        """Start a markdown crawl rooted at *url* and return its job id."""
        payload = self._request(
            "POST",
            "/v1/crawl",
            json={
                "url": url,
                "limit": limit,
                "scrapeOptions": {"formats": ["markdown"], "onlyMainContent": True},
            },
        )
        job_id = payload.get("id")
        if not job_id:
            raise UpstreamError("No job ID returned from crawl request")
        return str(job_id)

    def crawl_status(self, job_id: str) -> CrawlStatus:
        payload = self._request("GET", f"/v1/crawl/{job_id}")
        data = payload.get("data")
        return CrawlStatus(
            status=str(payload.get("status") or "processing"),
            completed=int(payload.get("completed") or 0),
            total=int(payload.get("total") or 0),
            pages=data if isinstance(data, list) else None,
        )

    def credit_usage(self) -> CreditUsage:
        payload = self._request("GET", "/v2/team/credit-usage")
        data = payload.get("data") or {}
        return CreditUsage(
            remaining_credits=int(data.get("remainingCredits") or 0),
            plan_credits=int(data.get("planCredits") or 0),
            billing_period_end=data.get("billingPeriodEnd"),
        )
