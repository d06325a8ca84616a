"""Website management commands."""

import typer

from linkmedic.db import ScanStore, get_connection, init_db
from linkmedic.errors import PersistenceError

site_app = typer.Typer(help="Manage monitored websites.")


@site_app.command("add")
def site_add(
    url: str = typer.Argument(..., help="Root URL of the website."),
    name: str = typer.Option(None, "--name", help="Display name (defaults to the URL)."),
) -> None:
    """Register a website to scan."""
    conn = get_connection()
    init_db(conn)

    try:
        store = ScanStore(conn)
        if store.get_website_by_url(url):
            typer.echo(f"❌ Website already registered: {url}")
            raise typer.Exit(code=1)
        website = store.create_website(name=name or url, url=url)
        typer.echo(f"✅ Website added: {website.name} [{website.id}]")
    except PersistenceError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)
    finally:
        conn.close()


@site_app.command("list")
def site_list() -> None:
    """List registered websites."""
    conn = get_connection()
    init_db(conn)

    try:
        websites = ScanStore(conn).list_websites()
        if not websites:
            typer.echo("No websites found.")
            return

        typer.echo("Websites:")
        for w in websites:
            typer.echo(f"  [{w.id}] {w.name} \t{w.url}")
    finally:
        conn.close()
