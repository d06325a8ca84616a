"""Tolerant parsing of model answers into :class:`AnalysisResult`.

Models routinely wrap JSON in markdown fences, omit fields, invent
importance levels, or return scores as strings.  Everything short of
unparseable JSON is repaired here; unparseable JSON raises
:class:`~linkmedic.errors.ValidationError` so the analyzer can fall back.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from linkmedic.analysis.models import AnalysisResult, Importance
from linkmedic.errors import ValidationError

MAX_SUGGESTED_FIXES = 3
DEFAULT_PRIORITY = 50

_FENCE_RE = re.compile(r"```(?:json)?\n?")

_DEFAULTS: dict[str, Any] = {
    "intendedDestination": "Unknown",
    "linkPurpose": "Unknown",
    "importance": Importance.MEDIUM.value,
    "businessImpact": "Unknown impact",
    "suggestedFixes": [],
    "reasoning": "No reasoning provided",
    "priorityScore": DEFAULT_PRIORITY,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def strip_code_fences(text: str) -> str:
    """Trim *text* and drop markdown fence markers if it opens with one."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = _FENCE_RE.sub("", stripped).strip()
    return stripped


def normalise_importance(value: Any) -> Importance:
    try:
        return Importance(value)
    except ValueError:
        return Importance.MEDIUM


def normalise_priority(value: Any) -> int:
    """Coerce *value* to an int in ``[0, 100]``; junk becomes 50."""
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        # float() overflows on huge JSON integers; clamp while still exact.
        value = max(0, min(100, value))
    try:
        score = float(value)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    if math.isnan(score):
        return DEFAULT_PRIORITY
    score = max(0.0, min(100.0, score))
    return round_half_up(score)


def normalise_fixes(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item][:MAX_SUGGESTED_FIXES]


def _field(payload: dict[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None or value == "":
        return _DEFAULTS[key]
    return value


def parse_analysis_response(text: str) -> AnalysisResult:
    """Parse raw model output into a fully-populated :class:`AnalysisResult`.

    Raises:
        ValidationError: If the text (after fence stripping) is not a JSON
            object.
    """
    cleaned = strip_code_fences(text or "")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON response from model: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationError(
            f"Expected a JSON object from model, got {type(payload).__name__}"
        )

    return AnalysisResult(
        intended_destination=str(_field(payload, "intendedDestination")),
        link_purpose=str(_field(payload, "linkPurpose")),
        importance=normalise_importance(_field(payload, "importance")),
        business_impact=str(_field(payload, "businessImpact")),
        suggested_fixes=normalise_fixes(_field(payload, "suggestedFixes")),
        reasoning=str(_field(payload, "reasoning")),
        priority_score=normalise_priority(_field(payload, "priorityScore")),
    )
