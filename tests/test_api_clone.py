"""Tests for the clone endpoint and the app-level plumbing.

Most tests patch ``clone_website`` at the router so only the HTTP contract is
exercised; one scenario runs the real pipeline with ``respx`` standing in
for both the scraping API and the target site.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import patch

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from sitecloner.api.app import create_app
from sitecloner.scraper.errors import FallbackError
from sitecloner.scraper.models import CloneResult

_API = "https://api.firecrawl.test"
_RESULT = CloneResult(
    url="https://ex.com/",
    html="<html><head></head><body>cloned</body></html>",
    text_content="cloned",
    method="firecrawl",
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app = create_app()
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# POST /api/clone
# ---------------------------------------------------------------------------

class TestCloneEndpoint:
    def test_success(self, client: TestClient) -> None:
        with patch("sitecloner.api.routers.clone.clone_website", return_value=_RESULT) as mock_clone:
            resp = client.post(
                "/api/clone",
                json={"url": "https://ex.com/", "chatScript": "<script></script>"},
            )

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["html"] == _RESULT.html
        assert data["textContent"] == "cloned"
        assert data["method"] == "firecrawl"
        assert data["size"] == _RESULT.size
        assert data["status"] == "Successfully cloned"
        mock_clone.assert_called_once_with("https://ex.com/", "<script></script>")

    def test_legacy_path(self, client: TestClient) -> None:
        with patch("sitecloner.api.routers.clone.clone_website", return_value=_RESULT):
            resp = client.post("/clone", json={"url": "https://ex.com/"})
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    def test_missing_url(self, client: TestClient) -> None:
        resp = client.post("/api/clone", json={})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "URL is required"}

    def test_missing_body(self, client: TestClient) -> None:
        resp = client.post("/api/clone")
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_malformed_url(self, client: TestClient) -> None:
        resp = client.post("/api/clone", json={"url": "javascript:alert(1)"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid URL format"

    def test_wrong_type_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/clone", json={"url": 42})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_both_paths_failed(self, client: TestClient) -> None:
        with patch(
            "sitecloner.api.routers.clone.clone_website",
            side_effect=FallbackError("Direct fetch returned HTTP 403"),
        ):
            resp = client.post("/api/clone", json={"url": "https://ex.com/"})

        assert resp.status_code == 500
        data = resp.json()
        assert data["success"] is False
        assert data["error"] == "Failed to clone website: Direct fetch returned HTTP 403"
        assert data["url"] == "https://ex.com/"

    def test_fallback_scenario_end_to_end(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sitecloner.config.settings.firecrawl_api_key", "fc-test")
        monkeypatch.setattr("sitecloner.config.settings.firecrawl_base_url", _API)
        with respx.mock:
            respx.post(f"{_API}/v1/scrape").mock(return_value=httpx.Response(500))
            respx.get("https://ex.com/landing").mock(
                return_value=httpx.Response(
                    200, text='<html><head></head><body><a href="/about">About</a></body></html>'
                )
            )
            resp = client.post("/api/clone", json={"url": "https://ex.com/landing"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["method"] == "direct-fetch"
        assert data["status"] == "Successfully cloned (direct fetch)"
        assert 'href="https://ex.com/about"' in data["html"]
        assert data["textContent"] == "About"


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "OK"
        assert "timestamp" in resp.json()


class TestCors:
    def test_preflight_allowed(self, client: TestClient) -> None:
        resp = client.options(
            "/api/clone",
            headers={
                "Origin": "https://frontend.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] in ("*", "https://frontend.example")
