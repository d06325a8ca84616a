"""CRUD operations for the ``websites`` table."""

from __future__ import annotations

import sqlite3
from time import time
from typing import Optional

from linkmedic.db.models import Website


def _row_to_website(row: sqlite3.Row) -> Website:
    return Website(
        id=row["id"],
        name=row["name"],
        url=row["url"],
        created_at=row["created_at"],
    )


def create_website(conn: sqlite3.Connection, name: str, url: str) -> Website:
    """Insert a website and return it.

    Raises:
        sqlite3.IntegrityError: If *url* is already registered.
    """
    with conn:
        cursor = conn.execute(
            "INSERT INTO websites (name, url, created_at) VALUES (?, ?, ?)",
            (name, url, int(time())),
        )
    return get_website(conn, cursor.lastrowid)  # type: ignore[return-value]


def get_website(conn: sqlite3.Connection, website_id: int) -> Optional[Website]:
    """Fetch a website by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM websites WHERE id = ?", (website_id,)).fetchone()
    return _row_to_website(row) if row else None


def get_website_by_url(conn: sqlite3.Connection, url: str) -> Optional[Website]:
    row = conn.execute("SELECT * FROM websites WHERE url = ?", (url,)).fetchone()
    return _row_to_website(row) if row else None


def list_websites(conn: sqlite3.Connection) -> list[Website]:
    rows = conn.execute("SELECT * FROM websites ORDER BY id").fetchall()
    return [_row_to_website(r) for r in rows]
