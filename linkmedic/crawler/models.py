"""Data models shared by crawlers and the scan pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol


class LinkState(str, Enum):
    OK = "ok"
    BROKEN = "broken"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class LinkResult:
    """One checked link as reported by a crawler.

    ``link_text``, ``html_context`` and ``parent_title`` are only filled by
    crawlers that saw the anchor element; the scan pipeline derives a label
    otherwise.
    """

    url: str
    state: LinkState
    status: Optional[int] = None
    parent: Optional[str] = None
    link_text: Optional[str] = None
    html_context: Optional[str] = None
    parent_title: Optional[str] = None

    @property
    def is_broken(self) -> bool:
        return self.state == LinkState.BROKEN


@dataclass
class CrawlOptions:
    """Options handed verbatim to the crawler."""

    path: str
    recurse: bool = False
    timeout: Optional[float] = None
    max_pages: Optional[int] = None
    user_agent: Optional[str] = None


@dataclass
class CrawlResult:
    links: List[LinkResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not any(link.is_broken for link in self.links)


@dataclass
class RawPage:
    """The raw HTTP response for a single page fetch."""

    url: str
    html: str
    status_code: int
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        return "html" in self.content_type.lower()


@dataclass
class Anchor:
    """An ``<a href>`` found on a page."""

    href: str
    text: str
    html: str


class Crawler(Protocol):
    """Crawl capability consumed by the scan orchestrator."""

    def check(self, options: CrawlOptions) -> CrawlResult:
        ...
