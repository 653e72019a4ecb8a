"""Clone endpoint.

Routes
------
POST /api/clone    Body: {"url": "https://...", "chatScript": "<script ...>"}
POST /clone        Legacy alias of /api/clone
"""

from __future__ import annotations

from typing import Any, Optional, Union

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sitecloner.api.responses import error_response
from sitecloner.scraper.errors import FallbackError, InputError
from sitecloner.scraper.service import clone_website

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class CloneRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    chat_script: Optional[str] = Field(default=None, alias="chatScript")


class CloneResponse(BaseModel):
    success: bool
    url: str
    html: str
    textContent: str
    method: str
    size: str
    status: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/api/clone", response_model=CloneResponse)
@router.post("/clone", response_model=CloneResponse, include_in_schema=False)
def clone_endpoint(body: Optional[CloneRequest] = None) -> Union[dict[str, Any], JSONResponse]:
    """Clone a website for iframe preview.

    Tries the scraping API first and falls back to a direct fetch.  Returns
    400 for a missing or malformed URL and 500 when both sources failed.
    """
    body = body or CloneRequest()
    try:
        result = clone_website(body.url, body.chat_script)
    except InputError as exc:
        return error_response(400, str(exc))
    except FallbackError as exc:
        return error_response(500, f"Failed to clone website: {exc}", url=body.url)

    status = "Successfully cloned"
    if result.method == "direct-fetch":
        status += " (direct fetch)"
    return {
        "success": True,
        "url": result.url,
        "html": result.html,
        "textContent": result.text_content,
        "method": result.method,
        "size": result.size,
        "status": status,
    }
