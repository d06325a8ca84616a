"""Scan lifecycle: crawl, analyse each broken link, persist, score.

State machine of the stored scan::

    RUNNING ──► COMPLETED
        └─────► FAILED

Failure policy
--------------
* Creating the scan record fails → the error propagates (nothing to mark).
* The crawl fails → the scan is marked FAILED and the error re-raised.
* One broken link fails (analysis, archive lookup or persistence) → logged,
  that link is skipped, the rest of the batch carries on.
* Finalisation fails → best-effort FAILED, then the error is re-raised, so a
  scan is never left RUNNING while the store is reachable.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from linkmedic.analysis.analyzer import LinkAnalyzer
from linkmedic.analysis.archive import ArchiveLookup
from linkmedic.analysis.context import extract_context
from linkmedic.analysis.models import AnalysisResult, BrokenLinkInput
from linkmedic.analysis.parsing import MAX_SUGGESTED_FIXES, round_half_up
from linkmedic.config import settings
from linkmedic.crawler.models import CrawlOptions, Crawler, LinkResult
from linkmedic.db.gateway import ScanStore
from linkmedic.db.models import ScanKind, SuggestedFix
from linkmedic.log import get_logger
from linkmedic.ratelimit import RateLimitedRunner
from linkmedic.scan.models import BrokenLinkFinding, ScanOutcome

logger = get_logger(__name__)


def compute_health_score(total_links: int, broken_links: int) -> int:
    """Percentage of working links, as an int in ``[0, 100]``.

    An empty crawl is perfectly healthy.
    """
    if total_links <= 0:
        return 100
    score = round_half_up((1 - broken_links / total_links) * 100)
    return max(0, min(100, score))


def _with_archive_fix(analysis: AnalysisResult, snapshot: str) -> None:
    fixes = [snapshot] + [fix for fix in analysis.suggested_fixes if fix != snapshot]
    analysis.suggested_fixes = fixes[:MAX_SUGGESTED_FIXES]


class ScanOrchestrator:
    """Run one scan for one website.

    Args:
        store: Persistence gateway; the orchestrator is its only writer for
            the scan it creates.
        crawler: Crawl capability (anything with ``check(options)``).
        analyzer: Link analyzer; its ``analyze_one`` never raises.
        website_id: Owner of the scan record.
        triggered_by: User reference for manual scans; ``None`` marks the
            scan as scheduled.
        archive: Wayback lookup; ``None`` disables archive suggestions.
        link_delay: Seconds between consecutive broken links.  Defaults to
            ``settings.link_delay``.
        sleep: Injected sleep function (tests pass a recorder).
        clock: Monotonic clock used for the scan duration.
    """

    def __init__(
        self,
        store: ScanStore,
        crawler: Crawler,
        analyzer: LinkAnalyzer,
        website_id: int,
        triggered_by: Optional[str] = None,
        archive: Optional[ArchiveLookup] = None,
        link_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._crawler = crawler
        self._analyzer = analyzer
        self._archive = archive
        self.website_id = website_id
        self.triggered_by = triggered_by
        self._runner = RateLimitedRunner(
            settings.link_delay if link_delay is None else link_delay, sleep=sleep
        )
        self._clock = clock

    @property
    def kind(self) -> ScanKind:
        return ScanKind.MANUAL if self.triggered_by else ScanKind.SCHEDULED

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, options: CrawlOptions) -> ScanOutcome:
        """Execute the full scan and return its :class:`ScanOutcome`.

        Raises:
            PersistenceError: If the scan record cannot be created or
                finalised.
            Exception: Whatever the crawler raised; the scan is FAILED first.
        """
        started = self._clock()

        scan = self._store.create_scan(self.website_id, self.kind, self.triggered_by)
        logger.info("[SCAN] Scan %s started for %s", scan.id, options.path)

        try:
            crawl = self._crawler.check(options)
        except Exception as exc:
            logger.error("[SCAN] Crawl failed for scan %s: %s", scan.id, exc)
            self._mark_failed(scan.id, exc)
            raise

        try:
            links = crawl.links
            broken = [link for link in links if link.is_broken]
            logger.info(
                "[SCAN] Crawl complete: %d link(s), %d broken", len(links), len(broken)
            )

            findings = [
                finding
                for finding in self._runner.map(
                    lambda link: self._process_link(scan.id, link, options), broken
                )
                if finding is not None
            ]

            health_score = compute_health_score(len(links), len(broken))
            self._store.complete_scan(scan.id, len(links), len(broken), health_score)
        except Exception as exc:
            logger.error("[SCAN] Scan %s could not be finalised: %s", scan.id, exc)
            self._mark_failed(scan.id, exc)
            raise

        duration = self._clock() - started
        logger.info(
            "[SCAN] Scan %s completed in %.2fs: health %d/100, %d finding(s)",
            scan.id,
            duration,
            health_score,
            len(findings),
        )
        return ScanOutcome(
            scan_id=scan.id,
            website_id=self.website_id,
            total_links=len(links),
            broken_links_count=len(broken),
            health_score=health_score,
            duration=duration,
            findings=findings,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _process_link(
        self, scan_id: int, link: LinkResult, options: CrawlOptions
    ) -> Optional[BrokenLinkFinding]:
        """Analyse and persist one broken link; ``None`` if anything failed."""
        try:
            return self._analyse_and_store(scan_id, link, options)
        except Exception as exc:  # noqa: BLE001
            logger.error("[SCAN] Skipping %s: %s", link.url, exc)
            return None

    def _analyse_and_store(
        self, scan_id: int, link: LinkResult, options: CrawlOptions
    ) -> BrokenLinkFinding:
        found_on = link.parent or options.path
        link_text = link.link_text
        html_context = link.html_context
        if not link_text or not html_context:
            derived = extract_context(link.url)
            link_text = link_text or derived.link_text
            html_context = html_context or derived.html_context

        analysis = self._analyzer.analyze_one(
            BrokenLinkInput(
                broken_url=link.url,
                status_code=link.status,
                found_on_url=found_on,
                found_on_title=link.parent_title,
                link_text=link_text,
                html_context=html_context,
            )
        )
        logger.info(
            "[ANALYZE] %s: %s (priority %d/100)",
            link.url,
            analysis.importance.value.upper(),
            analysis.priority_score,
        )

        if self._archive is not None:
            snapshot = self._archive.lookup(link.url)
            if snapshot:
                _with_archive_fix(analysis, snapshot)

        record = self._store.create_broken_link(
            scan_id, link.url, link.status, found_on, link_text, html_context
        )
        self._store.update_broken_link_analysis(
            record.id,
            analysis,
            [SuggestedFix.from_url(url) for url in analysis.suggested_fixes],
            analysis.priority_score,
            analysis.is_critical,
        )

        return BrokenLinkFinding(
            url=link.url,
            status_code=link.status,
            found_on=found_on,
            record_id=record.id,
            link_text=link_text,
            html_context=html_context,
            analysis=analysis,
        )

    def _mark_failed(self, scan_id: int, exc: BaseException) -> None:
        message = str(exc) or exc.__class__.__name__
        try:
            self._store.fail_scan(scan_id, message)
        except Exception as fail_exc:  # noqa: BLE001
            # The original error is re-raised by the caller.
            logger.error("[SCAN] Could not mark scan %s as failed: %s", scan_id, fail_exc)
