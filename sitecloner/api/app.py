"""FastAPI application factory.

Routers
-------
    /api/clone, /clone          — website cloning (scraping API + direct fetch)
    /api/firecrawl-scrape       — markdown scraping for the voice knowledge base
    /api/firecrawl-credits      — remaining scraping credits
    /api/voice-session          — ephemeral realtime voice credentials
    /health                     — liveness probe
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitecloner import __version__
from sitecloner.api.responses import error_response
from sitecloner.logs import configure_logging, get_logger

from sitecloner.api.routers import clone as clone_router
from sitecloner.api.routers import health as health_router
from sitecloner.api.routers import knowledge as knowledge_router
from sitecloner.api.routers import voice as voice_router

logger = get_logger(__name__)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 in the API's error shape."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    logger.info("Rejected invalid request", extra={"path": request.url.path, "errors": len(errors)})
    return error_response(400, f"{location}: {message}" if location else message)


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()

    app = FastAPI(
        title="Site Cloner API",
        description=(
            "Clones a website into iframe-safe HTML with an optional chat "
            "widget, scrapes markdown for the voice assistant's knowledge "
            "base, and issues realtime voice session credentials."
        ),
        version=__version__,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(clone_router.router, tags=["clone"])
    app.include_router(knowledge_router.router, prefix="/api", tags=["knowledge"])
    app.include_router(voice_router.router, prefix="/api", tags=["voice"])
    app.include_router(health_router.router, tags=["health"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn sitecloner.api.app:app --reload
app = create_app()
