"""High-level runner for a scan.

``run_scan`` wires together the DB layer, the default crawler, the configured
AI provider and (optionally) the Wayback lookup, so the CLI (and any future
API layer) can start a scan with one call.
"""

from __future__ import annotations

from typing import Optional

from linkmedic.analysis.analyzer import LinkAnalyzer
from linkmedic.analysis.archive import ArchiveLookup
from linkmedic.analysis.providers import AIProvider, build_provider
from linkmedic.config import settings
from linkmedic.crawler.checker import LinkChecker
from linkmedic.crawler.models import CrawlOptions, Crawler
from linkmedic.db import ScanStore, get_connection, init_db
from linkmedic.log import get_logger
from linkmedic.scan.models import ScanOutcome
from linkmedic.scan.orchestrator import ScanOrchestrator

logger = get_logger(__name__)


def run_scan(
    options: CrawlOptions,
    website_id: Optional[int] = None,
    triggered_by: Optional[str] = None,
    include_archive: Optional[bool] = None,
    provider: Optional[AIProvider] = None,
    crawler: Optional[Crawler] = None,
) -> ScanOutcome:
    """Scan ``options.path`` and persist the results.

    Opens its own DB connection for the duration of the run, then closes it
    on exit (success or error).  When *website_id* is omitted the website is
    looked up by URL and registered on first use.

    Args:
        options: Crawl options, handed verbatim to the crawler.
        website_id: Owner of the scan.
        triggered_by: User reference; makes the scan ``manual``.
        include_archive: Add Wayback snapshots to the suggested fixes.
            Defaults to ``settings.include_archive``.
        provider: AI provider override (defaults to :func:`build_provider`).
        crawler: Crawler override (defaults to :class:`LinkChecker`).

    Raises:
        ConfigurationError: If the AI provider is misconfigured.
        PersistenceError: If the website does not exist or storage fails.
    """
    # Resolve the provider first: a missing credential must fail before any
    # scan record is written.
    provider = provider or build_provider()
    if include_archive is None:
        include_archive = settings.include_archive

    conn = get_connection()
    init_db(conn)

    try:
        store = ScanStore(conn)
        if website_id is None:
            website = store.get_website_by_url(options.path) or store.create_website(
                name=options.path, url=options.path
            )
            website_id = website.id
            logger.info("[SCAN] Using website %s (%s)", website.id, website.url)

        orchestrator = ScanOrchestrator(
            store=store,
            crawler=crawler or LinkChecker(),
            analyzer=LinkAnalyzer(provider),
            website_id=website_id,
            triggered_by=triggered_by,
            archive=ArchiveLookup() if include_archive else None,
        )
        return orchestrator.run(options)
    finally:
        conn.close()
