"""Clone orchestration: scraping API first, direct fetch second.

At most two sequential network calls are made per clone.  A failure of the
primary source is logged and swallowed; a failure of the fallback is final
and carries its own message to the caller.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

from sitecloner.scraper.errors import (
    ConfigurationError,
    FallbackError,
    InputError,
    NoValidHtmlError,
    UpstreamError,
)
from sitecloner.scraper.fetcher import direct_fetch
from sitecloner.scraper.firecrawl import FirecrawlClient
from sitecloner.scraper.markdown import render_markdown
from sitecloner.scraper.models import CloneResult
from sitecloner.scraper.normalizer import normalize, prepare_snippet

logger = logging.getLogger(__name__)


def validate_url(url: Optional[str]) -> str:
    """Return *url* stripped, or raise :class:`InputError` if unusable."""
    if url is None or not url.strip():
        raise InputError("URL is required")
    cleaned = url.strip()
    parts = urlsplit(cleaned)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InputError("Invalid URL format")
    return cleaned


def _clone_with_firecrawl(
    client: FirecrawlClient, url: str, snippet: Optional[str]
) -> CloneResult:
    result = client.scrape(url, formats=("html",))
    if result.is_markdown:
        html = render_markdown(result.markdown or "")
    else:
        html = result.html or ""
    page = normalize(html, url, snippet)
    return CloneResult(
        url=url, html=page.html, text_content=page.text_content, method="firecrawl"
    )


def _clone_with_direct_fetch(url: str, snippet: Optional[str]) -> CloneResult:
    raw = direct_fetch(url)
    try:
        page = normalize(raw.html, raw.url, snippet)
    except NoValidHtmlError as exc:
        raise FallbackError(str(exc)) from exc
    return CloneResult(
        url=url, html=page.html, text_content=page.text_content, method="direct-fetch"
    )


def clone_website(
    url: Optional[str],
    chat_script: Optional[str] = None,
    *,
    firecrawl: Optional[FirecrawlClient] = None,
) -> CloneResult:
    """Fetch *url* and return it normalized for iframe display.

    Args:
        url: Page to clone; must be an absolute ``http(s)`` URL.
        chat_script: Optional snippet injected into the page head.
        firecrawl: Client for the primary source; built from settings when
            omitted.

    Raises:
        InputError: If *url* is missing or malformed (no fetch attempted).
        FallbackError: If both the scraping API and the direct fetch failed.
    """
    url = validate_url(url)
    snippet = prepare_snippet(chat_script)
    client = firecrawl or FirecrawlClient.from_settings()

    logger.info(
        "Cloning website",
        extra={"url": url, "chat_script": "provided" if snippet else "none"},
    )

    try:
        result = _clone_with_firecrawl(client, url, snippet)
    except (UpstreamError, ConfigurationError, NoValidHtmlError) as exc:
        logger.warning(
            "Primary scrape failed; trying direct fetch",
            extra={"url": url, "reason": str(exc)},
        )
    else:
        logger.info("Cloned via scraping API", extra={"url": url, "size": result.size})
        return result

    try:
        result = _clone_with_direct_fetch(url, snippet)
    except FallbackError:
        logger.error("Direct fetch failed", extra={"url": url}, exc_info=True)
        raise
    logger.info("Cloned via direct fetch", extra={"url": url, "size": result.size})
    return result
