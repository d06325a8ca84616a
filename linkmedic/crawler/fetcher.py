"""HTTP helpers for the crawler: page fetches and link status probes."""

from __future__ import annotations

from typing import Optional

import httpx

from linkmedic.crawler.models import RawPage

# Servers that refuse HEAD answer with one of these; retry those with GET.
_HEAD_UNSUPPORTED = {405, 501}


def build_client(user_agent: str, timeout: float) -> httpx.Client:
    return httpx.Client(
        headers={"User-Agent": user_agent},
        timeout=timeout,
        follow_redirects=True,
    )


def fetch_page(client: httpx.Client, url: str) -> RawPage:
    """GET *url* and return a :class:`RawPage` whatever the status code.

    Raises:
        httpx.HTTPError: On transport failures (DNS, timeouts, resets).
    """
    response = client.get(url)
    return RawPage(
        url=str(response.url),
        html=response.text,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
    )


def probe_status(client: httpx.Client, url: str) -> Optional[int]:
    """Return the final HTTP status for *url*, or ``None`` if unreachable."""
    try:
        response = client.head(url)
        if response.status_code in _HEAD_UNSUPPORTED:
            response = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL):
        return None
    return response.status_code


def is_broken_status(status: Optional[int]) -> bool:
    return status is None or status >= 400
