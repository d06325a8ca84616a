"""Anchor and title extraction from fetched HTML."""

from __future__ import annotations

from typing import List
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup

from linkmedic.crawler.models import Anchor

# Longest HTML snippet kept per anchor; enough for the prompt, small in the DB.
_MAX_SNIPPET = 500


def extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    soup = BeautifulSoup(html, "html.parser")
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def extract_anchors(html: str, base_url: str) -> List[Anchor]:
    """Return one :class:`Anchor` per distinct link target on the page.

    Hrefs are resolved against *base_url* (honouring ``<base href>``) and
    stripped of their fragment.  Fragment-only and empty hrefs are excluded.
    The first anchor seen for a target wins.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_tag = soup.find("base", href=True)
    if base_tag is not None:
        base_url = urljoin(base_url, base_tag["href"])

    seen: set[str] = set()
    anchors: List[Anchor] = []
    for tag in soup.find_all("a", href=True):
        href = tag["href"].strip()
        if not href or href.startswith("#"):
            continue
        target, _fragment = urldefrag(urljoin(base_url, href))
        if target in seen:
            continue
        seen.add(target)
        anchors.append(
            Anchor(
                href=target,
                text=tag.get_text(separator=" ", strip=True),
                html=str(tag)[:_MAX_SNIPPET],
            )
        )
    return anchors
