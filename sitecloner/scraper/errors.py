"""Exception hierarchy for the clone pipeline.

Routers map these onto HTTP status codes; the CLI maps them onto exit codes.
"""

from __future__ import annotations


class CloneError(Exception):
    """Base class for every error raised by :mod:`sitecloner`."""


class InputError(CloneError, ValueError):
    """Missing or malformed caller input (URL, voice, temperature...)."""


class ConfigurationError(CloneError):
    """A setting required for the requested operation is not configured."""


class UpstreamError(CloneError):
    """The primary scraping source (or another SaaS API) failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FallbackError(CloneError):
    """The direct-fetch fallback failed; there is nothing left to try."""


class NoValidHtmlError(CloneError):
    """The content handed to the normalizer does not look like HTML."""

    def __init__(self, message: str = "No valid HTML content found") -> None:
        super().__init__(message)
