"""Tests for run_scan wiring (DB on a temp workspace, fakes for I/O)."""

from __future__ import annotations

import json

import pytest

from linkmedic.crawler.models import CrawlOptions, CrawlResult, LinkResult, LinkState
from linkmedic.db import ScanStore, get_connection, init_db
from linkmedic.db.models import ScanKind, ScanStatus
from linkmedic.errors import ConfigurationError
from linkmedic.scan import run_scan

HOME = "https://site.test/"


class FakeCrawler:
    def check(self, options: CrawlOptions) -> CrawlResult:
        return CrawlResult(
            links=[
                LinkResult(url=HOME, state=LinkState.OK, status=200),
                LinkResult(url=HOME + "gone", state=LinkState.BROKEN, status=404, parent=HOME),
            ]
        )


class FixedProvider:
    def generate(self, prompt: str) -> str:
        return json.dumps({"importance": "low", "priorityScore": 10})


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    monkeypatch.setattr("linkmedic.config.settings.workspace_dir", tmp_path)
    monkeypatch.setattr("linkmedic.config.settings.link_delay", 0.0)
    monkeypatch.setattr("linkmedic.config.settings.analysis_delay", 0.0)
    return tmp_path


def _store() -> ScanStore:
    conn = get_connection()
    init_db(conn)
    return ScanStore(conn)


def test_registers_website_on_first_use():
    outcome = run_scan(CrawlOptions(path=HOME), provider=FixedProvider(), crawler=FakeCrawler())

    store = _store()
    website = store.get_website_by_url(HOME)
    assert website is not None
    assert outcome.website_id == website.id
    scan = store.get_scan(outcome.scan_id)
    assert scan.status == ScanStatus.COMPLETED
    assert scan.kind == ScanKind.SCHEDULED
    assert scan.health_score == 50
    assert [r.url for r in store.list_broken_links(scan.id)] == [HOME + "gone"]
    store.conn.close()


def test_reuses_existing_website():
    first = run_scan(CrawlOptions(path=HOME), provider=FixedProvider(), crawler=FakeCrawler())
    second = run_scan(
        CrawlOptions(path=HOME), triggered_by="alice", provider=FixedProvider(), crawler=FakeCrawler()
    )
    assert first.website_id == second.website_id

    store = _store()
    assert len(store.list_websites()) == 1
    assert store.get_scan(second.scan_id).kind == ScanKind.MANUAL
    store.conn.close()


def test_missing_credentials_write_nothing(monkeypatch, workspace):
    monkeypatch.setattr("linkmedic.config.settings.llm_provider", "openai")
    monkeypatch.setattr("linkmedic.config.settings.openai_api_key", "")

    with pytest.raises(ConfigurationError):
        run_scan(CrawlOptions(path=HOME), crawler=FakeCrawler())

    assert not (workspace / "linkmedic.db").exists()
