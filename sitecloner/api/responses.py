"""Shared response helpers for the HTTP layer.

Every failure leaves the API as ``{"success": false, "error": "..."}`` so the
frontend can treat all endpoints alike.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)
