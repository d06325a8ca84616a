"""Prompt construction for the link analyzer."""

from __future__ import annotations

from linkmedic.analysis.models import BrokenLinkInput

_SCHEMA = """\
{
  "intendedDestination": "string",
  "linkPurpose": "string",
  "importance": "critical|high|medium|low",
  "businessImpact": "string",
  "suggestedFixes": ["url1", "url2", "url3"],
  "reasoning": "string",
  "priorityScore": number
}"""


def build_analysis_prompt(data: BrokenLinkInput) -> str:
    """Return the analysis prompt for one broken link.

    Optional details (page title, link text, HTML snippet, surrounding text)
    are only included when present so the model is not fed empty fields.
    """
    details = [
        f"- Broken URL: {data.broken_url}",
        f"- HTTP Status Code: {data.status_code or 'unknown'}",
        f"- Found on page: {data.found_on_url}",
    ]
    if data.found_on_title:
        details.append(f"- Page title: {data.found_on_title}")
    if data.link_text:
        details.append(f'- Link text: "{data.link_text}"')
    if data.html_context:
        details.append(f"- HTML context: {data.html_context}")
    if data.surrounding_text:
        details.append(f"- Surrounding text: {data.surrounding_text}")

    return (
        "You are an expert web analyst helping an organisation triage broken "
        "links on its website.\n\n"
        "BROKEN LINK DETAILS:\n"
        + "\n".join(details)
        + "\n\n"
        "TASK:\n"
        "Analyze this broken link and answer in JSON. Consider:\n\n"
        "1. Intended Destination: what was this link supposed to point to?\n"
        "2. Link Purpose: why was this link placed here?\n"
        "3. Importance: how critical is this link? (critical/high/medium/low)\n"
        "   - critical: donation buttons, contact forms, main navigation\n"
        "   - high: important resources, program information\n"
        "   - medium: supporting content, related articles\n"
        "   - low: archived content, optional references\n"
        "4. Business Impact: how does this broken link affect the site's mission?\n"
        "5. Suggested Fixes: 1-3 specific replacement URLs that might work\n"
        "6. Reasoning: explain your analysis\n"
        "7. Priority Score: urgency from 0 to 100 (100 = most urgent)\n\n"
        "Return ONLY one valid JSON object, with no surrounding text, in exactly "
        "this format:\n"
        f"{_SCHEMA}"
    )
