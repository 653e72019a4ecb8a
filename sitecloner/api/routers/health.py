"""Liveness probe.

Routes
------
GET /health
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health() -> dict[str, Any]:
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
