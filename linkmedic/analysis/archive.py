"""Wayback Machine availability lookup.

``ArchiveLookup.lookup(url)`` returns the URL of the closest archived
snapshot, or ``None``.  It never raises: an archive outage must not abort a
scan, so transport errors, non-2xx answers and unexpected payloads are all
reported as "no result".  The two outcomes are logged differently so
operators can tell a miss from a failure.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from linkmedic.config import settings
from linkmedic.log import get_logger

logger = get_logger(__name__)


def _closest_snapshot(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    snapshots = payload.get("archived_snapshots")
    if not isinstance(snapshots, dict):
        return None
    closest = snapshots.get("closest")
    if not isinstance(closest, dict) or closest.get("available") is not True:
        return None
    url = closest.get("url")
    return url if isinstance(url, str) and url else None


class ArchiveLookup:
    """Query the Wayback Machine availability API.

    Args:
        client: Optional shared ``httpx.Client``.  When omitted a short-lived
            client is opened per lookup.
        timeout: Request timeout in seconds.
        api_url: Availability endpoint.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float | None = None,
        api_url: str | None = None,
    ) -> None:
        self._client = client
        self._timeout = settings.archive_timeout if timeout is None else timeout
        self._api_url = api_url or settings.archive_api_url

    def _get(self, url: str) -> httpx.Response:
        params = {"url": url}
        if self._client is not None:
            return self._client.get(self._api_url, params=params, timeout=self._timeout)
        with httpx.Client(timeout=self._timeout) as client:
            return client.get(self._api_url, params=params)

    def lookup(self, url: str) -> Optional[str]:
        """Return the closest available snapshot URL for *url*, or ``None``."""
        try:
            response = self._get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("[ARCHIVE] Lookup failed for %s: %s", url, exc)
            return None

        snapshot = _closest_snapshot(payload)
        if snapshot is None:
            logger.debug("[ARCHIVE] No snapshot available for %s", url)
        else:
            logger.info("[ARCHIVE] Snapshot found for %s: %s", url, snapshot)
        return snapshot
