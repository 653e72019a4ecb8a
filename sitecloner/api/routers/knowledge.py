"""Knowledge-base scraping endpoints (markdown for the voice assistant).

Routes
------
POST /api/firecrawl-scrape    Body: {"url", "type": "scrape"|"crawl", "maxPages", "jobId"?}
GET  /api/firecrawl-credits   Remaining scraping credits
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sitecloner.api.responses import error_response
from sitecloner.scraper.errors import ConfigurationError, InputError, UpstreamError
from sitecloner.scraper.firecrawl import FirecrawlClient, join_crawl_pages
from sitecloner.scraper.service import validate_url

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class KnowledgeScrapeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    type: Literal["scrape", "crawl"] = "scrape"
    max_pages: int = Field(default=1, ge=1, alias="maxPages")
    job_id: Optional[str] = Field(default=None, alias="jobId")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _scrape(client: FirecrawlClient, url: str) -> dict[str, Any]:
    result = client.scrape(url, formats=("markdown",), only_main_content=True)
    if not result.markdown:
        raise UpstreamError("No content extracted from the website")
    return {
        "success": True,
        "content": result.markdown,
        "pageCount": 1,
        "creditsUsed": 1,
        "type": "scrape",
    }


def _poll_crawl(client: FirecrawlClient, job_id: str, max_pages: int) -> Union[dict[str, Any], JSONResponse]:
    status = client.crawl_status(job_id)
    if status.status == "failed":
        return error_response(500, "Crawl job failed", status="failed")
    if status.status != "completed":
        return {
            "status": status.status,
            "completed": status.completed,
            "total": status.total or max_pages,
        }

    content, page_count = join_crawl_pages(status.pages or [])
    if not content:
        return error_response(500, "No content extracted from crawled pages")
    return {
        "success": True,
        "content": content,
        "pageCount": page_count,
        "creditsUsed": page_count,
        "type": "crawl",
        "status": "completed",
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/firecrawl-scrape", response_model=None)
def knowledge_scrape(body: KnowledgeScrapeRequest) -> Union[dict[str, Any], JSONResponse]:
    """Scrape one page, or start / poll a multi-page crawl, as markdown."""
    client = FirecrawlClient.from_settings()
    try:
        if body.type == "crawl" and body.job_id:
            return _poll_crawl(client, body.job_id, body.max_pages)

        url = validate_url(body.url)
        if body.type == "scrape":
            return _scrape(client, url)

        job_id = client.start_crawl(url, limit=body.max_pages)
        return {
            "success": True,
            "jobId": job_id,
            "status": "started",
            "message": "Crawl job started. Poll for status.",
        }
    except InputError as exc:
        return error_response(400, str(exc))
    except ConfigurationError as exc:
        return error_response(500, f"Server configuration error. {exc}")
    except UpstreamError as exc:
        return error_response(502, str(exc))


@router.get("/firecrawl-credits", response_model=None)
def knowledge_credits() -> Union[dict[str, Any], JSONResponse]:
    """Report remaining scraping credits without exposing the API key."""
    try:
        usage = FirecrawlClient.from_settings().credit_usage()
    except ConfigurationError as exc:
        return error_response(500, f"Server configuration error. {exc}")
    except UpstreamError as exc:
        return error_response(502, f"Failed to fetch credits: {exc}")

    return {
        "success": True,
        "remainingCredits": usage.remaining_credits,
        "planCredits": usage.plan_credits,
        "billingPeriodEnd": usage.billing_period_end,
        "usage": {"used": usage.used, "percentage": usage.percentage},
    }
