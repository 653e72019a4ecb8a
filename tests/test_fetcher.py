"""Tests for the direct-fetch fallback.

``respx`` patches ``httpx`` at the transport layer so no real network calls
are made.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from sitecloner.scraper.errors import FallbackError
from sitecloner.scraper.fetcher import accept_language_for, direct_fetch
from sitecloner.scraper.models import RawPage

_HTML = "<!DOCTYPE html><html><head><title>Shop</title></head><body>Hi</body></html>"


class TestAcceptLanguage:
    def test_israeli_commercial_domain_prefers_hebrew(self) -> None:
        assert accept_language_for("https://www.shop.co.il/page").startswith("he-IL")

    def test_other_domains_prefer_english(self) -> None:
        assert accept_language_for("https://example.com/").startswith("en-US")

    def test_plain_il_domain_is_english(self) -> None:
        assert accept_language_for("https://gov.il/").startswith("en-US")


class TestDirectFetch:
    def test_successful_fetch_returns_raw_page(self) -> None:
        with respx.mock:
            respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            raw = direct_fetch("https://example.com/")

        assert isinstance(raw, RawPage)
        assert raw.status_code == 200
        assert raw.html == _HTML

    def test_sends_browser_headers(self) -> None:
        with respx.mock:
            route = respx.get("https://www.shop.co.il/").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            direct_fetch("https://www.shop.co.il/")

        request = route.calls.last.request
        assert "Mozilla/5.0" in request.headers["User-Agent"]
        assert request.headers["Accept-Language"].startswith("he-IL")

    def test_follows_redirects(self) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": "https://example.com/new"})
            )
            respx.get("https://example.com/new").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            raw = direct_fetch("https://example.com/old")

        assert raw.html == _HTML
        assert raw.url == "https://example.com/new"

    def test_too_many_redirects(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sitecloner.config.settings.fallback_max_redirects", 1)
        with respx.mock:
            respx.get("https://example.com/a").mock(
                return_value=httpx.Response(302, headers={"Location": "https://example.com/b"})
            )
            respx.get("https://example.com/b").mock(
                return_value=httpx.Response(302, headers={"Location": "https://example.com/c"})
            )
            respx.get("https://example.com/c").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            with pytest.raises(FallbackError, match="redirects"):
                direct_fetch("https://example.com/a")

    def test_http_error_status(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            with pytest.raises(FallbackError, match="HTTP 404"):
                direct_fetch("https://example.com/missing")

    def test_timeout(self) -> None:
        with respx.mock:
            respx.get("https://slow.example.com/").mock(
                side_effect=httpx.ConnectTimeout("timed out")
            )
            with pytest.raises(FallbackError, match="timed out"):
                direct_fetch("https://slow.example.com/")

    def test_connection_error(self) -> None:
        with respx.mock:
            respx.get("https://down.example.com/").mock(
                side_effect=httpx.ConnectError("connection refused")
            )
            with pytest.raises(FallbackError, match="connection refused"):
                direct_fetch("https://down.example.com/")

    def test_non_html_body(self) -> None:
        with respx.mock:
            respx.get("https://example.com/api").mock(
                return_value=httpx.Response(200, json={"ok": True})
            )
            with pytest.raises(FallbackError, match="No valid HTML"):
                direct_fetch("https://example.com/api")
