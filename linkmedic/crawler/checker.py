"""A small breadth-first link checker.

``LinkChecker.check(options)`` fetches ``options.path``, checks every link
on it, and (with ``recurse``) follows working same-host HTML pages up to
``max_pages``.  Every ``(target, page)`` pair is reported once; each distinct
target is only probed once per crawl.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional
from urllib.parse import urlsplit

import httpx

from linkmedic.config import settings
from linkmedic.crawler.extractor import extract_anchors, extract_title
from linkmedic.crawler.fetcher import (
    build_client,
    fetch_page,
    is_broken_status,
    probe_status,
)
from linkmedic.crawler.models import CrawlOptions, CrawlResult, LinkResult, LinkState
from linkmedic.log import get_logger

logger = get_logger(__name__)

_CHECKED_SCHEMES = {"http", "https"}


def _state_for(status: Optional[int]) -> LinkState:
    return LinkState.BROKEN if is_broken_status(status) else LinkState.OK


class LinkChecker:
    """Default crawl collaborator.

    Args:
        client: Optional pre-built ``httpx.Client`` (tests inject one backed by
            ``respx``).  When omitted, a client is built per crawl from the
            options and ``settings``.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client

    def check(self, options: CrawlOptions) -> CrawlResult:
        """Crawl ``options.path`` and return every link found.

        Raises:
            ValueError: If ``options.path`` is not an absolute http(s) URL.
        """
        start = options.path
        if urlsplit(start).scheme not in _CHECKED_SCHEMES or not urlsplit(start).netloc:
            raise ValueError(f"Crawl path must be an absolute http(s) URL: {start!r}")

        if self._client is not None:
            return self._crawl(self._client, options)

        timeout = options.timeout if options.timeout is not None else settings.request_timeout
        with build_client(options.user_agent or settings.user_agent, timeout) as client:
            return self._crawl(client, options)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _crawl(self, client: httpx.Client, options: CrawlOptions) -> CrawlResult:
        max_pages = options.max_pages or settings.crawl_max_pages
        host = urlsplit(options.path).netloc.lower()

        statuses: Dict[str, Optional[int]] = {}
        links: List[LinkResult] = []
        queue: deque[str] = deque([options.path])
        queued: set[str] = {options.path}
        pages_crawled = 0

        while queue and pages_crawled < max_pages:
            page_url = queue.popleft()
            try:
                page = fetch_page(client, page_url)
                status: Optional[int] = page.status_code
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.warning("[CRAWL] Could not fetch %s: %s", page_url, exc)
                page = None
                status = None
            statuses[page_url] = status
            pages_crawled += 1

            if page_url == options.path:
                # The start page is itself a link under test.
                links.append(LinkResult(url=page_url, state=_state_for(status), status=status))

            if page is None or is_broken_status(status) or not page.is_html:
                continue

            anchors = extract_anchors(page.html, page.url)
            title = extract_title(page.html) or None
            logger.info("[CRAWL] %s: %d link(s)", page_url, len(anchors))

            for anchor in anchors:
                scheme = urlsplit(anchor.href).scheme.lower()
                if scheme not in _CHECKED_SCHEMES:
                    links.append(
                        LinkResult(
                            url=anchor.href,
                            state=LinkState.SKIPPED,
                            parent=page_url,
                            link_text=anchor.text or None,
                            html_context=anchor.html,
                            parent_title=title,
                        )
                    )
                    continue

                if anchor.href not in statuses:
                    statuses[anchor.href] = probe_status(client, anchor.href)
                target_status = statuses[anchor.href]
                state = _state_for(target_status)
                links.append(
                    LinkResult(
                        url=anchor.href,
                        state=state,
                        status=target_status,
                        parent=page_url,
                        link_text=anchor.text or None,
                        html_context=anchor.html,
                        parent_title=title,
                    )
                )

                if (
                    options.recurse
                    and state == LinkState.OK
                    and urlsplit(anchor.href).netloc.lower() == host
                    and anchor.href not in queued
                ):
                    queued.add(anchor.href)
                    queue.append(anchor.href)

        logger.info(
            "[CRAWL] Done: %d page(s) crawled, %d link(s) checked", pages_crawled, len(links)
        )
        return CrawlResult(links=links)
