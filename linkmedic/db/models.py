"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

from linkmedic.analysis.models import AnalysisResult

WAYBACK_HOST = "web.archive.org"
DEFAULT_FIX_CONFIDENCE = 0.8


class ScanStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ScanKind(str, Enum):
    SCHEDULED = "scheduled"
    MANUAL = "manual"


@dataclass
class Website:
    id: int
    name: str
    url: str
    created_at: int


@dataclass
class ScanSession:
    id: int
    website_id: int
    kind: ScanKind
    triggered_by: Optional[str]
    status: ScanStatus
    started_at: int
    completed_at: Optional[int]
    total_links: int
    broken_links: int
    health_score: Optional[int]
    error_message: Optional[str]

    @property
    def is_terminal(self) -> bool:
        return self.status != ScanStatus.RUNNING


@dataclass
class SuggestedFix:
    """One stored replacement candidate for a broken link."""

    url: str
    source: str
    confidence: float = DEFAULT_FIX_CONFIDENCE

    @classmethod
    def from_url(cls, url: str) -> SuggestedFix:
        """Tag *url* with where it came from (archive snapshot or AI)."""
        source = "wayback" if WAYBACK_HOST in url else "ai"
        return cls(url=url, source=source)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BrokenLinkRecord:
    id: int
    scan_id: int
    url: str
    status_code: Optional[int]
    found_on: str
    link_text: Optional[str]
    html_context: Optional[str]
    ai_analysis: Optional[dict[str, Any]]
    suggested_fixes: Optional[list[SuggestedFix]]
    priority_score: Optional[int]
    is_critical: bool
    created_at: int

    def analysis_result(self) -> Optional[AnalysisResult]:
        """Rebuild the :class:`AnalysisResult` this record was updated with.

        Returns ``None`` until the record has been analysed.
        """
        if self.ai_analysis is None:
            return None
        return AnalysisResult.from_dict(
            {
                **self.ai_analysis,
                "suggestedFixes": [fix.url for fix in self.suggested_fixes or []],
                "priorityScore": (
                    self.priority_score if self.priority_score is not None else 50
                ),
            }
        )
