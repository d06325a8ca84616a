"""Data models for the link analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Importance(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class BrokenLinkInput:
    """Everything the analyzer knows about one broken link."""

    broken_url: str
    status_code: Optional[int]
    found_on_url: str
    found_on_title: Optional[str] = None
    link_text: Optional[str] = None
    html_context: Optional[str] = None
    surrounding_text: Optional[str] = None


@dataclass
class AnalysisResult:
    """Structured verdict for one broken link.

    ``to_dict``/``from_dict`` use the camelCase keys of the JSON contract the
    model is asked to answer with, which is also the persisted shape.
    """

    intended_destination: str
    link_purpose: str
    importance: Importance
    business_impact: str
    suggested_fixes: list[str] = field(default_factory=list)
    reasoning: str = ""
    priority_score: int = 50

    @property
    def is_critical(self) -> bool:
        return self.importance == Importance.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        return {
            "intendedDestination": self.intended_destination,
            "linkPurpose": self.link_purpose,
            "importance": self.importance.value,
            "businessImpact": self.business_impact,
            "suggestedFixes": list(self.suggested_fixes),
            "reasoning": self.reasoning,
            "priorityScore": self.priority_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        return cls(
            intended_destination=data["intendedDestination"],
            link_purpose=data["linkPurpose"],
            importance=Importance(data["importance"]),
            business_impact=data["businessImpact"],
            suggested_fixes=list(data.get("suggestedFixes", [])),
            reasoning=data["reasoning"],
            priority_score=int(data["priorityScore"]),
        )


@dataclass
class LinkContext:
    """Label and markup describing where a link appeared."""

    link_text: str
    html_context: str
