"""Data models for the clone pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

CloneMethod = Literal["firecrawl", "direct-fetch"]


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch.

    ``url`` is where the body was served from, after any redirects.
    """

    url: str
    html: str
    status_code: int


@dataclass
class ScrapeResult:
    """What the scraping API handed back for a URL.

    Exactly one of ``html`` and ``markdown`` is set.
    """

    url: str
    html: Optional[str] = None
    markdown: Optional[str] = None
    status_code: int = 200

    @property
    def is_markdown(self) -> bool:
        return self.html is None and self.markdown is not None


@dataclass
class NormalizedPage:
    """Iframe-safe HTML plus its plain-text rendition."""

    html: str
    text_content: str = ""


@dataclass
class CloneResult:
    """Final outcome of a successful clone request."""

    url: str
    html: str
    text_content: str
    method: CloneMethod

    @property
    def size(self) -> str:
        """Human-readable size of the cloned HTML, e.g. ``"12.34 KB"``."""
        return f"{len(self.html) / 1024:.2f} KB"
