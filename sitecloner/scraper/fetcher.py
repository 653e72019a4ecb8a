"""Direct HTTP fetch, used when the scraping API cannot deliver a page."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx

from sitecloner.config import settings
from sitecloner.scraper.errors import FallbackError
from sitecloner.scraper.models import RawPage

logger = logging.getLogger(__name__)

_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}

_HEBREW_ACCEPT_LANGUAGE = "he-IL,he;q=0.9,en-US;q=0.8,en;q=0.7"
_ENGLISH_ACCEPT_LANGUAGE = "en-US,en;q=0.9"


def accept_language_for(url: str) -> str:
    """Pick an ``Accept-Language`` header value for *url*.

    Israeli commercial domains (``.co.il``) are served in Hebrew first;
    everything else asks for English.
    """
    host = (urlsplit(url).hostname or "").lower()
    if host.endswith(".co.il"):
        return _HEBREW_ACCEPT_LANGUAGE
    return _ENGLISH_ACCEPT_LANGUAGE


def direct_fetch(url: str) -> RawPage:
    """GET *url* with browser-like headers and return the page.

    Raises:
        FallbackError: On network errors, timeouts, too many redirects,
            4xx/5xx responses, or a body that is not HTML.
    """
    headers = dict(_BROWSER_HEADERS)
    headers["Accept-Language"] = accept_language_for(url)

    logger.info("Direct fetch", extra={"url": url})
    try:
        with httpx.Client(
            headers=headers,
            timeout=settings.fallback_timeout,
            follow_redirects=True,
            max_redirects=settings.fallback_max_redirects,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            html = response.text
            status_code = response.status_code
            final_url = str(response.url)
    except httpx.TimeoutException as exc:
        raise FallbackError(f"Direct fetch timed out after {settings.fallback_timeout}s") from exc
    except httpx.TooManyRedirects as exc:
        raise FallbackError(f"Direct fetch exceeded {settings.fallback_max_redirects} redirects") from exc
    except httpx.HTTPStatusError as exc:
        raise FallbackError(
            f"Direct fetch returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise FallbackError(f"Direct fetch failed: {exc}") from exc

    if "<html" not in html.lower():
        raise FallbackError("No valid HTML content found")

    return RawPage(url=final_url, html=html, status_code=status_code)
