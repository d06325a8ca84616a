"""URL-derived link labels, used when the crawler saw no anchor text."""

from __future__ import annotations

import html
import re
from urllib.parse import urlsplit

from linkmedic.analysis.models import LinkContext

_EXTENSION_RE = re.compile(r"\.(html|htm|php)$")
_SEPARATOR_RE = re.compile(r"[-_]")


def _capitalise(word: str) -> str:
    return word[:1].upper() + word[1:]


def link_label(url: str) -> str:
    """Turn the last path segment of *url* into a human-readable label.

    ``https://x.org/our-programs/youth_camp.html`` becomes ``"Youth Camp"``.
    The root path yields ``"Home"``; anything unparseable yields ``"Link"``.
    """
    try:
        parts = urlsplit(url)
        if not parts.scheme:
            raise ValueError(f"Not an absolute URL: {url!r}")
        segments = [s for s in parts.path.split("/") if s]
        last = segments[-1] if segments else "Home"
        last = _EXTENSION_RE.sub("", last)
        last = _SEPARATOR_RE.sub(" ", last)
        return " ".join(_capitalise(word) for word in last.split(" "))
    except Exception:  # noqa: BLE001
        return "Link"


def extract_context(url: str) -> LinkContext:
    """Return a minimal :class:`LinkContext` for *url*.  Never raises."""
    label = link_label(url)
    return LinkContext(
        link_text=label,
        html_context=f'<a href="{html.escape(url, quote=True)}">{html.escape(label)}</a>',
    )
