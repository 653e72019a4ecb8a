"""Render a markdown scrape result as a minimal HTML page.

The scraping API sometimes answers with markdown instead of markup.  The
clone endpoints still need a document to show in the iframe, so the markdown
is turned into a plain skeleton that the normalizer can then process like any
other page.
"""

from __future__ import annotations

from html import escape

from markdown_it import MarkdownIt

_SKELETON = """<!DOCTYPE html>
<html lang="en">
<head>
<title>{title}</title>
<style>
body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background: #fff; padding: 2rem; }}
.container {{ max-width: 1200px; margin: 0 auto; }}
a {{ color: #2563eb; text-decoration: none; }}
</style>
</head>
<body>
<div class="container">
{body}
</div>
</body>
</html>
"""

# Raw HTML in the scrape result is rendered as text; unsafe link schemes
# (javascript:, vbscript:, most data:) are rejected by the default validateLink.
_md = MarkdownIt().disable("html_block").disable("html_inline")


def render_markdown(content: str, title: str = "Cloned Website") -> str:
    """Return a complete HTML document presenting *content*."""
    body = _md.render(content.replace("\r\n", "\n")).strip()
    return _SKELETON.format(title=escape(title), body=body)
