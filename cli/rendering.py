"""Plain-text rendering of scan results for the CLI.

Everything here is a pure function of its input: no network, no DB.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from linkmedic.analysis.models import AnalysisResult
from linkmedic.db.models import BrokenLinkRecord, ScanSession
from linkmedic.scan.models import BrokenLinkFinding, ScanOutcome

_WIDTH = 80
_RULE = "─" * _WIDTH
_DOUBLE_RULE = "═" * _WIDTH


def _health_icon(score: Optional[int]) -> str:
    if score is None:
        return "⚪"
    if score >= 95:
        return "🟢"
    if score >= 80:
        return "🟡"
    if score >= 60:
        return "🟠"
    return "🔴"


def _by_priority(findings: List[BrokenLinkFinding]) -> List[BrokenLinkFinding]:
    # sorted() is stable, also with reverse=True, so ties keep crawl order.
    return sorted(
        findings,
        key=lambda f: (f.analysis is not None, f.priority_score),
        reverse=True,
    )


def _link_block(
    index: int,
    url: str,
    status_code: Optional[int],
    found_on: str,
    link_text: Optional[str],
    analysis: Optional[AnalysisResult],
) -> List[str]:
    lines = [f"[{index}] {url}"]
    if analysis is None:
        lines.append(f"    Status: {status_code or 'Unknown'} | Not analysed")
        lines.append(f"    Found On: {found_on}")
        lines.append("")
        return lines

    lines.append(
        f"    Status: {status_code or 'Unknown'} | "
        f"Priority: {analysis.priority_score}/100 | "
        f"Importance: {analysis.importance.value.upper()}"
    )
    lines.append(f"    Found On: {found_on}")
    if link_text:
        lines.append(f'    Link Text: "{link_text}"')
    lines.append("")
    lines.append(f"    📍 Intended: {analysis.intended_destination}")
    lines.append(f"    🎯 Purpose: {analysis.link_purpose}")
    lines.append(f"    💼 Business Impact: {analysis.business_impact}")
    lines.append(f"    💡 Reasoning: {analysis.reasoning}")
    if analysis.suggested_fixes:
        lines.append("")
        lines.append("    🔧 Suggested Fixes:")
        lines.extend(f"       • {fix}" for fix in analysis.suggested_fixes)
    lines.append("")
    return lines


def render_report(outcome: ScanOutcome) -> str:
    """Render a finished scan as a human-readable report.

    Findings are listed highest priority first.
    """
    lines = [
        "",
        _DOUBLE_RULE,
        "LinkMedic Scan Report".center(_WIDTH),
        _DOUBLE_RULE,
        "",
        "📊 SCAN SUMMARY",
        _RULE,
        f"Total Links Checked:    {outcome.total_links}",
        f"Broken Links Found:     {outcome.broken_links_count}",
        f"Critical Links:         {outcome.critical_count}",
        f"Health Score:           {outcome.health_score}/100 {_health_icon(outcome.health_score)}",
        f"Scan Duration:          {outcome.duration:.2f}s",
        f"Scan ID:                {outcome.scan_id}",
        "",
    ]

    if outcome.findings:
        lines.append("🔴 BROKEN LINKS")
        lines.append(_RULE)
        lines.append("")
        for i, finding in enumerate(_by_priority(outcome.findings), start=1):
            lines.extend(
                _link_block(
                    i,
                    finding.url,
                    finding.status_code,
                    finding.found_on,
                    finding.link_text,
                    finding.analysis,
                )
            )
        skipped = outcome.broken_links_count - len(outcome.findings)
        if skipped > 0:
            lines.append(f"⚠️  {skipped} broken link(s) could not be analysed; see the log.")
            lines.append("")
    elif outcome.broken_links_count:
        lines.append(
            f"⚠️  {outcome.broken_links_count} broken link(s) found, "
            "but none could be analysed; see the log."
        )
        lines.append("")
    else:
        lines.append("✅ NO BROKEN LINKS FOUND!")
        lines.append(f"All {outcome.total_links} links are working.")
        lines.append("")

    lines.append(_DOUBLE_RULE)
    return "\n".join(lines)


def _timestamp(value: Optional[int]) -> str:
    if value is None:
        return "-"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_scan_summary(scan: ScanSession, records: List[BrokenLinkRecord]) -> str:
    """Render a stored scan and its broken links (already priority-ordered)."""
    lines = [
        f"Scan {scan.id}  [{scan.status.value.upper()}]  website={scan.website_id}  "
        f"kind={scan.kind.value}",
        f"  Started:   {_timestamp(scan.started_at)}",
        f"  Finished:  {_timestamp(scan.completed_at)}",
        f"  Links:     {scan.total_links} total, {scan.broken_links} broken",
        f"  Health:    "
        + (
            f"{scan.health_score}/100 {_health_icon(scan.health_score)}"
            if scan.health_score is not None
            else "-"
        ),
    ]
    if scan.error_message:
        lines.append(f"  Error:     {scan.error_message}")
    lines.append("")

    for i, record in enumerate(records, start=1):
        lines.extend(
            _link_block(
                i,
                record.url,
                record.status_code,
                record.found_on,
                record.link_text,
                record.analysis_result(),
            )
        )
    return "\n".join(lines).rstrip() + "\n"
