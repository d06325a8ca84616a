"""Rule-based analysis used whenever the AI provider cannot answer.

The result depends only on the input, so tests and repeated scans see the
same verdict for the same link.
"""

from __future__ import annotations

import re

from linkmedic.analysis.models import AnalysisResult, BrokenLinkInput, Importance

FALLBACK_LINK_PURPOSE = "Unable to analyze - AI provider unavailable"
FALLBACK_REASONING = (
    "Fallback analysis due to AI error. Based on link text and URL patterns."
)

_LAST_SEGMENT_RE = re.compile(r"/[^/]*$")
_TRAILING_SLASH_RE = re.compile(r"/$")


def classify(link_text: str | None, url: str) -> tuple[Importance, int]:
    """Return ``(importance, priority_score)`` from keyword rules.

    Rules are checked in order; the first match wins.
    """
    text = (link_text or "").lower()
    url_lower = url.lower()

    if "donate" in text or "donation" in text or "/donate" in url_lower:
        return Importance.CRITICAL, 95
    if any(word in text for word in ("contact", "apply", "register")):
        return Importance.CRITICAL, 90
    if any(word in text for word in ("program", "service", "about")):
        return Importance.HIGH, 70
    if "archive" in text or "/archive/" in url_lower or "/old/" in url_lower:
        return Importance.LOW, 25
    return Importance.MEDIUM, 50


def fallback_suggestions(found_on_url: str, broken_url: str) -> list[str]:
    """Two cheap guesses: the parent of the referring page, and the broken
    URL without its trailing slash."""
    return [
        _LAST_SEGMENT_RE.sub("", found_on_url, count=1),
        _TRAILING_SLASH_RE.sub("", broken_url, count=1),
    ]


def fallback_analysis(data: BrokenLinkInput) -> AnalysisResult:
    importance, score = classify(data.link_text, data.broken_url)
    if importance == Importance.CRITICAL:
        impact = "May prevent users from taking important actions"
    else:
        impact = "May reduce user experience quality"

    return AnalysisResult(
        intended_destination=(
            f"Page or resource related to: {data.link_text or 'unknown content'}"
        ),
        link_purpose=FALLBACK_LINK_PURPOSE,
        importance=importance,
        business_impact=impact,
        suggested_fixes=fallback_suggestions(data.found_on_url, data.broken_url),
        reasoning=FALLBACK_REASONING,
        priority_score=score,
    )
