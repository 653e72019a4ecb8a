"""Knowledge-base commands: markdown scraping and credit checks."""

import time

import typer

from sitecloner.scraper.errors import CloneError
from sitecloner.scraper.firecrawl import FirecrawlClient, join_crawl_pages
from sitecloner.scraper.service import validate_url

knowledge_app = typer.Typer(help="Scrape markdown for the voice assistant's knowledge base.")


@knowledge_app.command("scrape")
def kb_scrape(
    url: str = typer.Argument(..., help="Page to scrape."),
    max_pages: int = typer.Option(1, "--max-pages", min=1, help="Crawl up to this many pages."),
    poll_interval: float = typer.Option(2.0, "--poll-interval", help="Seconds between crawl polls."),
) -> None:
    """Print a page (or a small crawl) as markdown."""
    client = FirecrawlClient.from_settings()
    try:
        url = validate_url(url)
        if max_pages == 1:
            result = client.scrape(url, formats=("markdown",), only_main_content=True)
            typer.echo(result.markdown or "")
            return

        job_id = client.start_crawl(url, limit=max_pages)
        typer.echo(f"🕸️  Crawl started: {job_id}", err=True)
        status = client.crawl_status(job_id)
        while not status.is_finished:
            typer.echo(f"⏳ {status.status} ({status.completed}/{status.total or max_pages})", err=True)
            time.sleep(poll_interval)
            status = client.crawl_status(job_id)
    except CloneError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)

    if status.status == "failed":
        typer.echo("❌ Crawl job failed")
        raise typer.Exit(code=1)
    content, page_count = join_crawl_pages(status.pages or [])
    typer.echo(f"✅ {page_count} pages crawled", err=True)
    typer.echo(content)


@knowledge_app.command("credits")
def kb_credits() -> None:
    """Show remaining scraping credits."""
    try:
        usage = FirecrawlClient.from_settings().credit_usage()
    except CloneError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)

    typer.echo(f"Remaining : {usage.remaining_credits}")
    typer.echo(f"Plan      : {usage.plan_credits}")
    typer.echo(f"Used      : {usage.used} ({usage.percentage}%)")
    if usage.billing_period_end:
        typer.echo(f"Period end: {usage.billing_period_end}")
