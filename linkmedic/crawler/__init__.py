"""Crawler package — link discovery and status checking."""

from linkmedic.crawler.checker import LinkChecker
from linkmedic.crawler.models import (
    CrawlOptions,
    Crawler,
    CrawlResult,
    LinkResult,
    LinkState,
)

__all__ = ["LinkChecker", "Crawler", "CrawlOptions", "CrawlResult", "LinkResult", "LinkState"]
