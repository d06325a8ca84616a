"""CRUD operations for the ``broken_links`` table.

A broken-link row is inserted as soon as a link is processed and updated
once with its analysis.  Analysis and fixes are stored as JSON text::

    ai_analysis     {"intendedDestination": ..., "linkPurpose": ...,
                     "importance": ..., "businessImpact": ..., "reasoning": ...}
    suggested_fixes [{"url": ..., "source": "ai" | "wayback", "confidence": 0.8}]
"""

from __future__ import annotations

import json
import sqlite3
from time import time
from typing import Optional

from linkmedic.analysis.models import AnalysisResult
from linkmedic.db.models import BrokenLinkRecord, SuggestedFix

# Keys of AnalysisResult.to_dict() kept in the ai_analysis column; fixes and
# score have their own columns.
_ANALYSIS_KEYS = (
    "intendedDestination",
    "linkPurpose",
    "importance",
    "businessImpact",
    "reasoning",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_record(row: sqlite3.Row) -> BrokenLinkRecord:
    fixes_raw = row["suggested_fixes"]
    analysis_raw = row["ai_analysis"]
    return BrokenLinkRecord(
        id=row["id"],
        scan_id=row["scan_id"],
        url=row["url"],
        status_code=row["status_code"],
        found_on=row["found_on"],
        link_text=row["link_text"],
        html_context=row["html_context"],
        ai_analysis=json.loads(analysis_raw) if analysis_raw else None,
        suggested_fixes=(
            [SuggestedFix(**fix) for fix in json.loads(fixes_raw)] if fixes_raw else None
        ),
        priority_score=row["priority_score"],
        is_critical=bool(row["is_critical"]),
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_broken_link(
    conn: sqlite3.Connection,
    scan_id: int,
    url: str,
    status_code: Optional[int],
    found_on: str,
    link_text: Optional[str] = None,
    html_context: Optional[str] = None,
) -> BrokenLinkRecord:
    """Insert an (unanalysed) broken link for *scan_id* and return it."""
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO broken_links
                (scan_id, url, status_code, found_on, link_text, html_context, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (scan_id, url, status_code, found_on, link_text or None, html_context or None, int(time())),
        )
    return get_broken_link(conn, cursor.lastrowid)  # type: ignore[return-value]


def get_broken_link(conn: sqlite3.Connection, link_id: int) -> Optional[BrokenLinkRecord]:
    """Fetch a broken link by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM broken_links WHERE id = ?", (link_id,)).fetchone()
    return _row_to_record(row) if row else None


def update_broken_link_analysis(
    conn: sqlite3.Connection,
    link_id: int,
    analysis: AnalysisResult,
    fixes: list[SuggestedFix],
    priority_score: int,
    is_critical: bool,
) -> BrokenLinkRecord:
    """Attach an analysis, its fixes and priority to a broken link.

    Raises:
        ValueError: If *link_id* does not exist.
    """
    payload = analysis.to_dict()
    analysis_json = json.dumps({key: payload[key] for key in _ANALYSIS_KEYS})
    fixes_json = json.dumps([fix.to_dict() for fix in fixes])

    with conn:
        cursor = conn.execute(
            """
            UPDATE broken_links
            SET    ai_analysis = ?, suggested_fixes = ?, priority_score = ?, is_critical = ?
            WHERE  id = ?
            """,
            (analysis_json, fixes_json, priority_score, int(is_critical), link_id),
        )
    if cursor.rowcount == 0:
        raise ValueError(f"Broken link not found: {link_id!r}")
    return get_broken_link(conn, link_id)  # type: ignore[return-value]


def list_broken_links(conn: sqlite3.Connection, scan_id: int) -> list[BrokenLinkRecord]:
    """Return every broken link of *scan_id*, highest priority first.

    Unanalysed links (no priority yet) sort last.
    """
    rows = conn.execute(
        """
        SELECT * FROM broken_links
        WHERE  scan_id = ?
        ORDER  BY priority_score IS NULL, priority_score DESC, id
        """,
        (scan_id,),
    ).fetchall()
    return [_row_to_record(r) for r in rows]
