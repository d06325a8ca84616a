"""Tests for the link checker (HTML parsing + HTTP mocked with respx)."""

from __future__ import annotations

import httpx
import pytest
import respx

from linkmedic.crawler import CrawlOptions, LinkChecker, LinkState
from linkmedic.crawler.extractor import extract_anchors, extract_title
from linkmedic.crawler.fetcher import is_broken_status, probe_status

HOME = "https://site.test/"

HOME_HTML = """
<html>
  <head><title>Helping Hands</title></head>
  <body>
    <nav>
      <a href="/about">About us</a>
      <a href="/donate">Donate <b>Now</b></a>
      <a href="https://elsewhere.test/partner">Our partner</a>
      <a href="mailto:info@site.test">Email</a>
      <a href="#top">Top</a>
      <a href="">Empty</a>
      <a href="/about#team">Team</a>
    </nav>
  </body>
</html>
"""


def _by_url(result):
    return {link.url: link for link in result.links}


class TestExtractor:
    def test_title(self) -> None:
        assert extract_title(HOME_HTML) == "Helping Hands"
        assert extract_title("<p>no title</p>") == ""

    def test_anchors_resolved_and_deduplicated(self) -> None:
        anchors = extract_anchors(HOME_HTML, HOME)
        assert [a.href for a in anchors] == [
            "https://site.test/about",
            "https://site.test/donate",
            "https://elsewhere.test/partner",
            "mailto:info@site.test",
        ]

    def test_anchor_text_and_markup(self) -> None:
        donate = extract_anchors(HOME_HTML, HOME)[1]
        assert donate.text == "Donate Now"
        assert donate.html == '<a href="/donate">Donate <b>Now</b></a>'

    def test_base_href_honoured(self) -> None:
        html = '<html><head><base href="https://cdn.test/docs/"></head><a href="guide">Guide</a></html>'
        assert extract_anchors(html, HOME)[0].href == "https://cdn.test/docs/guide"

    def test_long_markup_truncated(self) -> None:
        html = f'<a href="/x">{"word " * 300}</a>'
        assert len(extract_anchors(html, HOME)[0].html) == 500


class TestFetcher:
    def test_is_broken_status(self) -> None:
        assert is_broken_status(None)
        assert is_broken_status(404)
        assert is_broken_status(500)
        assert not is_broken_status(200)
        assert not is_broken_status(301)

    def test_head_not_allowed_falls_back_to_get(self) -> None:
        with respx.mock:
            respx.head("https://site.test/form").mock(return_value=httpx.Response(405))
            respx.get("https://site.test/form").mock(return_value=httpx.Response(200))
            with httpx.Client() as client:
                assert probe_status(client, "https://site.test/form") == 200

    def test_unreachable_is_none(self) -> None:
        with respx.mock:
            respx.head("https://down.test/").mock(side_effect=httpx.ConnectError("refused"))
            with httpx.Client() as client:
                assert probe_status(client, "https://down.test/") is None


class TestLinkChecker:
    def _mock_home(self) -> None:
        respx.get(HOME).mock(return_value=httpx.Response(200, html=HOME_HTML))
        respx.head("https://site.test/about").mock(return_value=httpx.Response(200))
        respx.head("https://site.test/donate").mock(return_value=httpx.Response(404))
        respx.head("https://elsewhere.test/partner").mock(
            side_effect=httpx.ConnectError("no route")
        )

    def test_single_page(self) -> None:
        with respx.mock:
            self._mock_home()
            result = LinkChecker().check(CrawlOptions(path=HOME))

        links = _by_url(result)
        assert links[HOME].state == LinkState.OK
        assert links[HOME].parent is None
        assert links["https://site.test/about"].state == LinkState.OK

        donate = links["https://site.test/donate"]
        assert donate.state == LinkState.BROKEN
        assert donate.status == 404
        assert donate.parent == HOME
        assert donate.link_text == "Donate Now"
        assert donate.html_context == '<a href="/donate">Donate <b>Now</b></a>'
        assert donate.parent_title == "Helping Hands"

        partner = links["https://elsewhere.test/partner"]
        assert partner.state == LinkState.BROKEN
        assert partner.status is None

        assert links["mailto:info@site.test"].state == LinkState.SKIPPED
        assert not result.passed

    def test_recurse_follows_same_host_pages(self) -> None:
        about_html = '<a href="/">Home</a><a href="/team-old">Team</a>'
        with respx.mock:
            self._mock_home()
            respx.get("https://site.test/about").mock(
                return_value=httpx.Response(200, html=about_html)
            )
            respx.head("https://site.test/team-old").mock(return_value=httpx.Response(410))
            result = LinkChecker().check(CrawlOptions(path=HOME, recurse=True))

        broken = [(l.url, l.parent) for l in result.links if l.is_broken]
        assert ("https://site.test/team-old", "https://site.test/about") in broken
        assert ("https://site.test/donate", HOME) in broken

    def test_max_pages_limits_recursion(self) -> None:
        with respx.mock:
            self._mock_home()
            result = LinkChecker().check(CrawlOptions(path=HOME, recurse=True, max_pages=1))
        assert all(link.parent in (None, HOME) for link in result.links)

    def test_start_page_error(self) -> None:
        with respx.mock:
            respx.get(HOME).mock(return_value=httpx.Response(500))
            result = LinkChecker().check(CrawlOptions(path=HOME))
        assert len(result.links) == 1
        assert result.links[0].state == LinkState.BROKEN
        assert result.links[0].status == 500

    def test_start_page_unreachable(self) -> None:
        with respx.mock:
            respx.get(HOME).mock(side_effect=httpx.ConnectError("refused"))
            result = LinkChecker().check(CrawlOptions(path=HOME))
        assert [(l.url, l.status) for l in result.links] == [(HOME, None)]

    def test_non_http_path_rejected(self) -> None:
        with pytest.raises(ValueError):
            LinkChecker().check(CrawlOptions(path="ftp://site.test/"))
        with pytest.raises(ValueError):
            LinkChecker().check(CrawlOptions(path="/relative/path"))

    def test_injected_client(self) -> None:
        with respx.mock:
            self._mock_home()
            with httpx.Client() as client:
                result = LinkChecker(client=client).check(CrawlOptions(path=HOME))
        assert len(result.links) == 5
