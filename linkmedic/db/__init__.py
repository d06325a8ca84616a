"""Database layer package.

Public re-exports so callers can write::

    from linkmedic.db import get_connection, init_db, ScanStore
"""

from linkmedic.db.connection import get_connection
from linkmedic.db.gateway import ScanStore
from linkmedic.db.migrations import init_db

__all__ = ["get_connection", "init_db", "ScanStore"]
