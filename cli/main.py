"""LinkMedic CLI — entry-point for all operations.

Usage:
    python cli/main.py --help

Command groups:
    db    → database setup
    site  → monitored websites
    scan  → run scans and inspect results
    ai    → AI provider diagnostics
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkmedic.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from linkmedic.config import settings
from linkmedic.db import get_connection, init_db
from linkmedic.errors import ConfigurationError

from cli.commands.scan import scan_app
from cli.commands.site import site_app

app = typer.Typer(
    name="linkmedic",
    help="LinkMedic: AI-prioritised broken-link reports.",
    no_args_is_help=True,
)

app.add_typer(site_app, name="site")
app.add_typer(scan_app, name="scan")

# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# AI commands
# ---------------------------------------------------------------------------
ai_app = typer.Typer(help="AI provider diagnostics.", no_args_is_help=True)
app.add_typer(ai_app, name="ai")


@ai_app.command("ping")
def ai_ping() -> None:
    """Check that the configured AI provider answers."""
    from linkmedic.analysis import LinkAnalyzer, build_provider

    try:
        analyzer = LinkAnalyzer(build_provider())
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(code=2)

    typer.echo(f"[ai ping] Provider: {settings.llm_provider}")
    if analyzer.test_connection():
        typer.echo("✅ AI provider connection successful.")
    else:
        typer.echo("❌ AI provider connection failed.")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
