"""Scan package — the broken-link analysis pipeline.

Public API::

    from linkmedic.scan import run_scan
    outcome = run_scan(CrawlOptions(path="https://example.org"))
"""

from linkmedic.scan.models import BrokenLinkFinding, ScanOutcome
from linkmedic.scan.orchestrator import ScanOrchestrator, compute_health_score
from linkmedic.scan.runner import run_scan

__all__ = [
    "run_scan",
    "ScanOrchestrator",
    "compute_health_score",
    "BrokenLinkFinding",
    "ScanOutcome",
]
