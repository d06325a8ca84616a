"""SQLite connection factory for the scan database."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from linkmedic.config import settings

_MEMORY = ":memory:"


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open the scan database.

    Rows come back as :class:`sqlite3.Row`.  Foreign keys are enforced so a
    broken link cannot outlive its scan, and file databases use WAL so
    ``scan show`` can read while a scan is writing.

    Args:
        db_path: Database file, or ``":memory:"`` for tests.  Defaults to
            ``settings.db_path``; the workspace directory is created on demand.
    """
    path = str(db_path or settings.db_path)
    if path != _MEMORY:
        settings.ensure_workspace()

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    if path != _MEMORY:
        conn.execute("PRAGMA journal_mode = WAL")
    return conn
