"""HTML normalization: turns fetched markup into iframe-safe HTML.

The rewrite steps (URL absolutization, script stripping) are regex based so
that everything the caller injects, and everything the site wrote that we do
not touch, survives byte-for-byte.  Text extraction goes through a real parse
tree.

Normalizing an already-normalized document with the same arguments returns
it unchanged.
"""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from sitecloner.scraper.errors import InputError, NoValidHtmlError
from sitecloner.scraper.models import NormalizedPage

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_LOOKS_LIKE_HTML_RE = re.compile(r"<(?:html|head|body)\b", re.IGNORECASE)
_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_BASE_TAG_RE = re.compile(r"<base\b[^>]*>", re.IGNORECASE)

# src="/x", href='/x', data-src="//cdn/x"; group "slashes" is "/" or "//".
_URL_ATTR_RE = re.compile(
    r"(?<![\w-])(?P<attr>data-src|src|href)\s*=\s*(?P<quote>[\"'])(?P<slashes>//?)(?!/)",
    re.IGNORECASE,
)
_CSS_URL_RE = re.compile(
    r"(?<![\w-])url\(\s*(?P<quote>[\"']?)(?P<slashes>//?)(?!/)",
    re.IGNORECASE,
)
_SRCSET_ATTR_RE = re.compile(
    r"(?<![\w-])(?P<attr>(?:data-)?srcset)\s*=\s*(?P<quote>[\"'])(?P<value>.*?)(?P=quote)",
    re.IGNORECASE | re.DOTALL,
)
_SRCSET_CANDIDATE_RE = re.compile(r"(?P<lead>^|,)(?P<space>\s*)(?P<slashes>//?)(?!/)")

_SCRIPT_RE = re.compile(
    r"<script\b(?P<attrs>[^>]*)>(?P<body>.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)
_SCRIPT_OPEN_RE = re.compile(r"<script\b(?P<attrs>[^>]*)>", re.IGNORECASE)
_SCRIPT_SRC_RE = re.compile(r"(?<![\w-])src\s*=", re.IGNORECASE)
_UNSAFE_SCRIPT_TOKENS = ("fetch", "XMLHttpRequest", "window.location", "document.location")

_HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

# Elements that never carry readable page content.
_NON_CONTENT_TAGS = ["head", "script", "style", "noscript", "iframe", "svg", "link", "meta"]
# Cookie banners, popups and ad slots.
_NOISE_SELECTORS = [
    '[class*="cookie"]',
    '[id*="cookie"]',
    '[class*="popup"]',
    '[id*="popup"]',
    ".ads",
    ".advertisement",
]

_COMPAT_STYLE = (
    "<style data-sitecloner>"
    "* { box-sizing: border-box; } "
    "body { margin: 0; padding: 0; overflow-x: hidden; } "
    "img { max-width: 100%; height: auto; } "
    ".container, .wrapper { max-width: 100%; }"
    "</style>"
)


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for *url*.

    Default ports are dropped, matching what a browser reports as the origin.

    Raises:
        InputError: If *url* is not absolute.
    """
    parts = urlsplit(url.strip())
    try:
        port = parts.port
    except ValueError as exc:
        raise InputError(f"Invalid port in URL: {url!r}") from exc
    host = parts.hostname
    if not parts.scheme or not host:
        raise InputError(f"Not an absolute URL: {url!r}")

    scheme = parts.scheme.lower()
    if ":" in host:
        host = f"[{host}]"
    if port is not None and (scheme, port) not in {("http", 80), ("https", 443)}:
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _absolute_prefix(slashes: str, base_url: str) -> str:
    # "//" is protocol-relative, "/" is root-relative.
    return "https://" if slashes == "//" else f"{base_url}/"


def _attr_prefix(match: re.Match) -> str:
    # The matched `attr="` text, as the page wrote it.
    return match.group(0)[: -len(match.group("slashes"))]


def _rewrite_srcset(match: re.Match, base_url: str) -> str:
    value = _SRCSET_CANDIDATE_RE.sub(
        lambda m: m.group("lead") + m.group("space") + _absolute_prefix(m.group("slashes"), base_url),
        match.group("value"),
    )
    quote = match.group("quote")
    return f"{match.group('attr')}={quote}{value}{quote}"


def _filter_script(match: re.Match) -> str:
    if _SCRIPT_SRC_RE.search(match.group("attrs")):
        return ""
    body = match.group("body")
    if any(token in body for token in _UNSAFE_SCRIPT_TOKENS):
        return ""
    return match.group(0)


def _rewrite_fragment(html: str, base_url: str) -> str:
    html = _URL_ATTR_RE.sub(
        lambda m: _attr_prefix(m) + _absolute_prefix(m.group("slashes"), base_url),
        html,
    )
    html = _CSS_URL_RE.sub(
        lambda m: "url(" + m.group("quote") + _absolute_prefix(m.group("slashes"), base_url),
        html,
    )
    html = _SRCSET_ATTR_RE.sub(lambda m: _rewrite_srcset(m, base_url), html)
    html = _SCRIPT_RE.sub(_filter_script, html)
    # Unterminated external scripts, e.g. at the end of a truncated page.
    return _SCRIPT_OPEN_RE.sub(
        lambda m: "" if _SCRIPT_SRC_RE.search(m.group("attrs")) else m.group(0),
        html,
    )


def _rewrite(html: str, base_url: str, protected: Optional[str]) -> str:
    """Apply URL and script rewriting everywhere except inside *protected*."""
    if protected and protected in html:
        return protected.join(
            _rewrite_fragment(part, base_url) for part in html.split(protected)
        )
    return _rewrite_fragment(html, base_url)


def _head_block(html: str, base_url: str, injected_snippet: Optional[str]) -> str:
    parts = []
    if not _BASE_TAG_RE.search(html):
        parts.extend([
            f'<base href="{base_url}/">',
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            _COMPAT_STYLE,
        ])
    if injected_snippet and injected_snippet not in html:
        parts.append(injected_snippet)
    return "\n".join(parts)


def _inject_head(html: str, block: str, source_url: str) -> str:
    if not block:
        return html
    head = _HEAD_OPEN_RE.search(html)
    if head is None:
        logger.warning(
            "No <head> tag; skipping base/meta/snippet injection",
            extra={"source_url": source_url},
        )
        return html
    end = head.end()
    return f"{html[:end]}\n{block}{html[end:]}"


def _tidy_text(text: str) -> str:
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    lines = (line.strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def prepare_snippet(snippet: Optional[str]) -> Optional[str]:
    """Clean up a caller-supplied snippet before injection.

    Surrounding whitespace is trimmed and a leading and/or trailing quote
    character is dropped (snippets pasted from JSON often keep them).
    Returns ``None`` when nothing usable is left.
    """
    if snippet is None:
        return None
    cleaned = snippet.strip()
    if cleaned[:1] in ("'", '"'):
        cleaned = cleaned[1:]
    if cleaned[-1:] in ("'", '"'):
        cleaned = cleaned[:-1]
    cleaned = cleaned.strip()
    return cleaned or None


def extract_text(html: str) -> str:
    """Return a whitespace-normalized plain-text rendition of the page body.

    Never raises; a document that cannot be parsed yields an empty string.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
        root = soup.body or soup
        for tag in root(_NON_CONTENT_TAGS):
            if not tag.decomposed:
                tag.decompose()
        for tag in root.select(", ".join(_NOISE_SELECTORS)):
            if not tag.decomposed:
                tag.decompose()
        text = root.get_text(separator=" ")
    except Exception:  # noqa: BLE001
        logger.warning("Text extraction failed; returning empty text", exc_info=True)
        return ""
    return _tidy_text(text)


def normalize(
    html: str,
    source_url: str,
    injected_snippet: Optional[str] = None,
) -> NormalizedPage:
    """Rewrite *html* so it renders correctly inside a sandboxed iframe.

    Root-relative ``src``/``href``/``data-src``/``srcset``/CSS ``url()``
    references are resolved against the origin of *source_url*,
    protocol-relative ones get an ``https:`` scheme, scripts with a ``src``
    are dropped, and inline scripts that fetch or navigate are dropped.  A
    ``<base>`` tag, charset/viewport metas and *injected_snippet* are placed
    right after the opening ``<head>``.  *injected_snippet* is inserted
    verbatim and is never rewritten or stripped.

    Raises:
        NoValidHtmlError: If *html* has no ``<html>``, ``<head>`` or
            ``<body>`` tag.
        InputError: If *source_url* is not an absolute URL.
    """
    if not html or not _LOOKS_LIKE_HTML_RE.search(html):
        raise NoValidHtmlError()

    base_url = origin_of(source_url)
    rewritten = _rewrite(html, base_url, injected_snippet)
    rewritten = _inject_head(
        rewritten, _head_block(rewritten, base_url, injected_snippet), source_url
    )

    return NormalizedPage(html=rewritten, text_content=extract_text(html))
