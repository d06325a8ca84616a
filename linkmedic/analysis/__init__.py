"""Analysis package — AI-backed link triage with a rule-based fallback."""

from linkmedic.analysis.analyzer import LinkAnalyzer
from linkmedic.analysis.archive import ArchiveLookup
from linkmedic.analysis.context import extract_context
from linkmedic.analysis.fallback import fallback_analysis
from linkmedic.analysis.models import (
    AnalysisResult,
    BrokenLinkInput,
    Importance,
    LinkContext,
)
from linkmedic.analysis.parsing import parse_analysis_response
from linkmedic.analysis.providers import AIProvider, build_provider

__all__ = [
    "LinkAnalyzer",
    "ArchiveLookup",
    "extract_context",
    "fallback_analysis",
    "parse_analysis_response",
    "AnalysisResult",
    "BrokenLinkInput",
    "Importance",
    "LinkContext",
    "AIProvider",
    "build_provider",
]
