"""Scraper package: page fetching, HTML normalization and clone orchestration."""

from sitecloner.scraper.errors import (
    CloneError,
    ConfigurationError,
    FallbackError,
    InputError,
    NoValidHtmlError,
    UpstreamError,
)
from sitecloner.scraper.fetcher import direct_fetch
from sitecloner.scraper.models import CloneResult, NormalizedPage, RawPage, ScrapeResult
from sitecloner.scraper.normalizer import extract_text, normalize
from sitecloner.scraper.service import clone_website

__all__ = [
    "clone_website",
    "direct_fetch",
    "normalize",
    "extract_text",
    "RawPage",
    "ScrapeResult",
    "NormalizedPage",
    "CloneResult",
    "CloneError",
    "ConfigurationError",
    "FallbackError",
    "InputError",
    "NoValidHtmlError",
    "UpstreamError",
]
