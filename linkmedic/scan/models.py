"""In-memory results of a scan run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from linkmedic.analysis.models import AnalysisResult


@dataclass
class BrokenLinkFinding:
    """A broken link enriched with its analysis and stored record id."""

    url: str
    status_code: Optional[int]
    found_on: str
    record_id: int
    link_text: Optional[str] = None
    html_context: Optional[str] = None
    analysis: Optional[AnalysisResult] = None

    @property
    def priority_score(self) -> int:
        return self.analysis.priority_score if self.analysis else 0


@dataclass
class ScanOutcome:
    """Aggregate returned by :meth:`ScanOrchestrator.run`."""

    scan_id: int
    website_id: int
    total_links: int
    broken_links_count: int
    health_score: int
    duration: float
    findings: List[BrokenLinkFinding] = field(default_factory=list)

    @property
    def critical_count(self) -> int:
        return sum(1 for f in self.findings if f.analysis and f.analysis.is_critical)
