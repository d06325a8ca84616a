"""CRUD operations for the ``scan_results`` table.

A scan row is inserted ``running`` and moves exactly once to ``completed``
or ``failed``.  The terminal updates are guarded by ``WHERE status =
'running'`` so a finished scan can never be rewritten.
"""

from __future__ import annotations

import sqlite3
from time import time
from typing import Optional

from linkmedic.db.models import ScanKind, ScanSession, ScanStatus


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_scan(row: sqlite3.Row) -> ScanSession:
    return ScanSession(
        id=row["id"],
        website_id=row["website_id"],
        kind=ScanKind(row["scan_type"]),
        triggered_by=row["triggered_by"],
        status=ScanStatus(row["status"]),
        started_at=row["started_at"],
        completed_at=row["completed_at"],
        total_links=row["total_links"],
        broken_links=row["broken_links"],
        health_score=row["health_score"],
        error_message=row["error_message"],
    )


def _finish(conn: sqlite3.Connection, scan_id: int, sql: str, params: tuple) -> ScanSession:
    with conn:
        cursor = conn.execute(sql, params)
    if cursor.rowcount == 0:
        existing = get_scan(conn, scan_id)
        if existing is None:
            raise ValueError(f"Scan not found: {scan_id!r}")
        raise ValueError(
            f"Scan {scan_id!r} is already {existing.status.value}; refusing to update"
        )
    return get_scan(conn, scan_id)  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_scan(
    conn: sqlite3.Connection,
    website_id: int,
    kind: ScanKind,
    triggered_by: Optional[str] = None,
) -> ScanSession:
    """Insert a ``running`` scan for *website_id* and return it."""
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO scan_results (website_id, scan_type, triggered_by, status, started_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (website_id, ScanKind(kind).value, triggered_by, ScanStatus.RUNNING.value, int(time())),
        )
    return get_scan(conn, cursor.lastrowid)  # type: ignore[return-value]


def get_scan(conn: sqlite3.Connection, scan_id: int) -> Optional[ScanSession]:
    """Fetch a scan by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM scan_results WHERE id = ?", (scan_id,)).fetchone()
    return _row_to_scan(row) if row else None


def complete_scan(
    conn: sqlite3.Connection,
    scan_id: int,
    total_links: int,
    broken_links: int,
    health_score: int,
) -> ScanSession:
    """Mark a running scan ``completed`` with its counts and health score.

    Raises:
        ValueError: If the scan does not exist or is no longer running.
    """
    return _finish(
        conn,
        scan_id,
        """
        UPDATE scan_results
        SET    status = ?, completed_at = ?, total_links = ?,
               broken_links = ?, health_score = ?
        WHERE  id = ? AND status = ?
        """,
        (
            ScanStatus.COMPLETED.value,
            int(time()),
            total_links,
            broken_links,
            health_score,
            scan_id,
            ScanStatus.RUNNING.value,
        ),
    )


def fail_scan(conn: sqlite3.Connection, scan_id: int, message: str) -> ScanSession:
    """Mark a running scan ``failed`` with *message*.

    Raises:
        ValueError: If the scan does not exist or is no longer running.
    """
    return _finish(
        conn,
        scan_id,
        """
        UPDATE scan_results
        SET    status = ?, completed_at = ?, error_message = ?
        WHERE  id = ? AND status = ?
        """,
        (ScanStatus.FAILED.value, int(time()), message, scan_id, ScanStatus.RUNNING.value),
    )


def get_latest_scan(conn: sqlite3.Connection, website_id: int) -> Optional[ScanSession]:
    """Return the most recently started scan for *website_id*, if any."""
    row = conn.execute(
        """
        SELECT * FROM scan_results
        WHERE  website_id = ?
        ORDER  BY started_at DESC, id DESC
        LIMIT  1
        """,
        (website_id,),
    ).fetchone()
    return _row_to_scan(row) if row else None


def list_scans(conn: sqlite3.Connection, website_id: int) -> list[ScanSession]:
    """Return all scans for *website_id*, newest first."""
    rows = conn.execute(
        "SELECT * FROM scan_results WHERE website_id = ? ORDER BY started_at DESC, id DESC",
        (website_id,),
    ).fetchall()
    return [_row_to_scan(r) for r in rows]
