"""Site cloner CLI — entry-point for clone and scraping operations.

Usage:
    python cli/main.py --help

Commands:
    clone      → clone a live site (scraping API, then direct fetch)
    normalize  → normalize a saved HTML file offline
    kb         → markdown scraping / credits for the voice knowledge base
    serve      → run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from sitecloner.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from cli.commands.knowledge import knowledge_app
from sitecloner.config import settings
from sitecloner.logs import configure_logging
from sitecloner.scraper.errors import CloneError
from sitecloner.scraper.normalizer import normalize, prepare_snippet

app = typer.Typer(
    name="sitecloner",
    help="Site cloner CLI.",
    no_args_is_help=True,
)
app.add_typer(knowledge_app, name="kb")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Emit JSON logs to stdout."),
) -> None:
    if verbose:
        settings.log_level = "DEBUG"
        configure_logging()


def _write(path: Path, content: str, label: str) -> None:
    path.write_text(content, encoding="utf-8")
    typer.echo(f"[{label}] Wrote {len(content) / 1024:.2f} KB to {path}")


# ---------------------------------------------------------------------------
# Clone commands
# ---------------------------------------------------------------------------
@app.command("clone")
def clone(
    url: str = typer.Argument(..., help="URL of the site to clone."),
    chat_script: Optional[str] = typer.Option(
        None, "--chat-script", help="Snippet to inject into the page head."
    ),
    output: Path = typer.Option(
        Path("homepage-clone.html"), "--output", "-o", help="Where to save the HTML."
    ),
    text_output: Optional[Path] = typer.Option(
        None, "--text-output", help="Also save the extracted plain text here."
    ),
) -> None:
    """Clone a website into a standalone, iframe-safe HTML file."""
    from sitecloner.scraper.service import clone_website

    typer.echo(f"[clone] Cloning {url!r} …")
    try:
        result = clone_website(url, chat_script)
    except CloneError as exc:
        typer.echo(f"[clone] Failed: {exc}")
        raise typer.Exit(1)

    typer.echo(f"[clone] Method : {result.method}")
    typer.echo(f"[clone] Size   : {result.size}")
    _write(output, result.html, "clone")
    if text_output is not None:
        _write(text_output, result.text_content, "clone")


@app.command("normalize")
def normalize_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved HTML file."),
    source_url: str = typer.Option(..., "--source-url", help="URL the HTML was fetched from."),
    chat_script: Optional[str] = typer.Option(
        None, "--chat-script", help="Snippet to inject into the page head."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Where to save the HTML (default: stdout)."
    ),
    text: bool = typer.Option(False, "--text", help="Print the extracted text instead."),
) -> None:
    """Normalize a saved HTML file without any network access."""
    raw = path.read_text(encoding="utf-8", errors="replace")
    try:
        page = normalize(raw, source_url, prepare_snippet(chat_script))
    except CloneError as exc:
        typer.echo(f"[normalize] Failed: {exc}")
        raise typer.Exit(1)

    content = page.text_content if text else page.html
    if output is None:
        typer.echo(content)
    else:
        _write(output, content, "normalize")


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(3003, help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Run the clone API with uvicorn."""
    import uvicorn

    typer.echo(f"[serve] Clone API on http://{host}:{port}")
    uvicorn.run("sitecloner.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
