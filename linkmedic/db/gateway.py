"""Persistence gateway used by the scan orchestrator.

``ScanStore`` binds the module-level CRUD helpers to one connection and
translates every storage failure (``sqlite3.Error`` and the ``ValueError``s
raised for missing or finished rows) into
:class:`~linkmedic.errors.PersistenceError`, so callers handle a single
error type regardless of the backend.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from linkmedic.analysis.models import AnalysisResult
from linkmedic.db import broken_links, scans, websites
from linkmedic.db.models import (
    BrokenLinkRecord,
    ScanKind,
    ScanSession,
    SuggestedFix,
    Website,
)
from linkmedic.errors import PersistenceError


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except (sqlite3.Error, ValueError) as exc:
        raise PersistenceError(f"Could not {action}: {exc}") from exc


class ScanStore:
    """SQLite-backed persistence gateway.

    Args:
        conn: Open, initialised connection (see :func:`linkmedic.db.init_db`).
            The store does not own it; the caller closes it.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # ------------------------------------------------------------------
    # Websites
    # ------------------------------------------------------------------

    def create_website(self, name: str, url: str) -> Website:
        with _storage_errors("create website"):
            return websites.create_website(self.conn, name, url)

    def get_website(self, website_id: int) -> Optional[Website]:
        with _storage_errors("read website"):
            return websites.get_website(self.conn, website_id)

    def get_website_by_url(self, url: str) -> Optional[Website]:
        with _storage_errors("read website"):
            return websites.get_website_by_url(self.conn, url)

    def list_websites(self) -> list[Website]:
        with _storage_errors("list websites"):
            return websites.list_websites(self.conn)

    # ------------------------------------------------------------------
    # Scan lifecycle
    # ------------------------------------------------------------------

    def create_scan(
        self,
        website_id: int,
        kind: ScanKind,
        triggered_by: Optional[str] = None,
    ) -> ScanSession:
        with _storage_errors("create scan"):
            return scans.create_scan(self.conn, website_id, kind, triggered_by)

    def complete_scan(
        self,
        scan_id: int,
        total_links: int,
        broken_links_count: int,
        health_score: int,
    ) -> ScanSession:
        with _storage_errors("complete scan"):
            return scans.complete_scan(
                self.conn, scan_id, total_links, broken_links_count, health_score
            )

    def fail_scan(self, scan_id: int, message: str) -> ScanSession:
        with _storage_errors("fail scan"):
            return scans.fail_scan(self.conn, scan_id, message)

    def get_scan(self, scan_id: int) -> Optional[ScanSession]:
        with _storage_errors("read scan"):
            return scans.get_scan(self.conn, scan_id)

    def get_latest_scan(self, website_id: int) -> Optional[ScanSession]:
        with _storage_errors("read scan"):
            return scans.get_latest_scan(self.conn, website_id)

    def list_scans(self, website_id: int) -> list[ScanSession]:
        with _storage_errors("list scans"):
            return scans.list_scans(self.conn, website_id)

    # ------------------------------------------------------------------
    # Broken links
    # ------------------------------------------------------------------

    def create_broken_link(
        self,
        scan_id: int,
        url: str,
        status_code: Optional[int],
        found_on: str,
        link_text: Optional[str] = None,
        html_context: Optional[str] = None,
    ) -> BrokenLinkRecord:
        with _storage_errors("create broken link"):
            return broken_links.create_broken_link(
                self.conn, scan_id, url, status_code, found_on, link_text, html_context
            )

    def update_broken_link_analysis(
        self,
        link_id: int,
        analysis: AnalysisResult,
        fixes: list[SuggestedFix],
        priority_score: int,
        is_critical: bool,
    ) -> BrokenLinkRecord:
        with _storage_errors("update broken link"):
            return broken_links.update_broken_link_analysis(
                self.conn, link_id, analysis, fixes, priority_score, is_critical
            )

    def get_broken_link(self, link_id: int) -> Optional[BrokenLinkRecord]:
        with _storage_errors("read broken link"):
            return broken_links.get_broken_link(self.conn, link_id)

    def list_broken_links(self, scan_id: int) -> list[BrokenLinkRecord]:
        with _storage_errors("list broken links"):
            return broken_links.list_broken_links(self.conn, scan_id)
