"""Scan commands: run a scan and inspect stored results."""

from typing import Optional

import typer

from linkmedic.config import settings
from linkmedic.crawler.models import CrawlOptions
from linkmedic.db import ScanStore, get_connection, init_db
from linkmedic.errors import ConfigurationError, LinkMedicError
from linkmedic.scan import run_scan

from cli.rendering import render_report, render_scan_summary

scan_app = typer.Typer(help="Run scans and inspect their results.")


@scan_app.command("run")
def scan_run(
    url: str = typer.Argument(..., help="Start URL to crawl."),
    website_id: int = typer.Option(None, "--website-id", help="Existing website id (default: look up by URL)."),
    recurse: bool = typer.Option(False, "--recurse", help="Follow same-site pages."),
    max_pages: int = typer.Option(None, "--max-pages", help="Page limit when recursing."),
    timeout: float = typer.Option(None, "--timeout", help="Per-request timeout in seconds."),
    archive: Optional[bool] = typer.Option(
        None, "--archive/--no-archive", help="Suggest Wayback Machine snapshots."
    ),
    triggered_by: str = typer.Option(None, "--triggered-by", help="User reference; marks the scan manual."),
) -> None:
    """Crawl a site, analyse every broken link, and print the report."""
    options = CrawlOptions(
        path=url,
        recurse=recurse,
        timeout=timeout if timeout is not None else settings.request_timeout,
        max_pages=max_pages,
    )

    typer.echo(f"🚀 Scanning {url} …")
    try:
        outcome = run_scan(
            options,
            website_id=website_id,
            triggered_by=triggered_by,
            include_archive=archive,
        )
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(code=2)
    except (LinkMedicError, ValueError) as e:
        typer.echo(f"❌ Scan failed: {e}")
        raise typer.Exit(code=1)

    typer.echo(render_report(outcome))


@scan_app.command("show")
def scan_show(
    scan_id: int = typer.Argument(..., help="Scan id."),
) -> None:
    """Show a stored scan and its broken links."""
    conn = get_connection()
    init_db(conn)

    try:
        store = ScanStore(conn)
        scan = store.get_scan(scan_id)
        if scan is None:
            typer.echo(f"❌ Scan not found: {scan_id}")
            raise typer.Exit(code=1)
        typer.echo(render_scan_summary(scan, store.list_broken_links(scan.id)))
    finally:
        conn.close()


@scan_app.command("latest")
def scan_latest(
    website_id: int = typer.Argument(..., help="Website id."),
) -> None:
    """Show the most recent scan of a website."""
    conn = get_connection()
    init_db(conn)

    try:
        store = ScanStore(conn)
        scan = store.get_latest_scan(website_id)
        if scan is None:
            typer.echo(f"No scans found for website {website_id}.")
            return
        typer.echo(render_scan_summary(scan, store.list_broken_links(scan.id)))
    finally:
        conn.close()


@scan_app.command("list")
def scan_list(
    website_id: int = typer.Argument(..., help="Website id."),
) -> None:
    """List every scan of a website, newest first."""
    conn = get_connection()
    init_db(conn)

    try:
        scans = ScanStore(conn).list_scans(website_id)
        if not scans:
            typer.echo(f"No scans found for website {website_id}.")
            return
        for s in scans:
            health = f"{s.health_score}/100" if s.health_score is not None else "-"
            typer.echo(
                f"  [{s.id}] {s.status.value:<9} {s.kind.value:<9} "
                f"links={s.total_links} broken={s.broken_links} health={health}"
            )
    finally:
        conn.close()
