"""Tests for LinkAnalyzer: AI answers, fallbacks and batch pacing."""

from __future__ import annotations

import json
from typing import List, Union

from linkmedic.analysis.analyzer import LinkAnalyzer
from linkmedic.analysis.fallback import FALLBACK_LINK_PURPOSE
from linkmedic.analysis.models import BrokenLinkInput, Importance
from linkmedic.analysis.prompt import build_analysis_prompt
from linkmedic.errors import TransportError


def _answer(score: int = 80, importance: str = "high") -> str:
    return json.dumps(
        {
            "intendedDestination": "Programs page",
            "linkPurpose": "Navigation",
            "importance": importance,
            "businessImpact": "Visitors cannot find programs",
            "suggestedFixes": ["https://example.org/programs"],
            "reasoning": "Main navigation link",
            "priorityScore": score,
        }
    )


class ScriptedProvider:
    """Returns (or raises) the scripted replies in order and records prompts."""

    def __init__(self, replies: List[Union[str, Exception]]) -> None:
        self.replies = list(replies)
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _input(url: str = "https://example.org/programs-old", text: str = "Our Programs") -> BrokenLinkInput:
    return BrokenLinkInput(
        broken_url=url,
        status_code=404,
        found_on_url="https://example.org/",
        link_text=text,
    )


class TestAnalyzeOne:
    def test_ai_answer_parsed(self) -> None:
        analyzer = LinkAnalyzer(ScriptedProvider([_answer(score=81)]), delay=0)
        result = analyzer.analyze_one(_input())
        assert result.importance == Importance.HIGH
        assert result.priority_score == 81
        assert result.link_purpose == "Navigation"

    def test_transport_error_falls_back(self) -> None:
        analyzer = LinkAnalyzer(ScriptedProvider([TransportError("timeout")]), delay=0)
        result = analyzer.analyze_one(_input(text="Donate"))
        assert result.link_purpose == FALLBACK_LINK_PURPOSE
        assert result.importance == Importance.CRITICAL
        assert result.priority_score == 95

    def test_unparseable_answer_falls_back(self) -> None:
        analyzer = LinkAnalyzer(ScriptedProvider(["Sorry, I cannot help."]), delay=0)
        result = analyzer.analyze_one(_input())
        assert result.link_purpose == FALLBACK_LINK_PURPOSE

    def test_unexpected_provider_error_falls_back(self) -> None:
        analyzer = LinkAnalyzer(ScriptedProvider([RuntimeError("boom")]), delay=0)
        result = analyzer.analyze_one(_input())
        assert result.link_purpose == FALLBACK_LINK_PURPOSE

    def test_huge_priority_is_not_a_failure(self) -> None:
        reply = '{"importance": "high", "linkPurpose": "Navigation", "priorityScore": 1' + "0" * 400 + "}"
        result = LinkAnalyzer(ScriptedProvider([reply]), delay=0).analyze_one(_input())
        assert result.importance == Importance.HIGH
        assert result.priority_score == 100
        assert result.link_purpose == "Navigation"

    def test_prompt_sent_to_provider(self) -> None:
        provider = ScriptedProvider([_answer()])
        data = _input()
        LinkAnalyzer(provider, delay=0).analyze_one(data)
        assert provider.prompts == [build_analysis_prompt(data)]


class TestAnalyzeBatch:
    def test_order_preserved_and_paced(self) -> None:
        sleep = SleepRecorder()
        provider = ScriptedProvider([_answer(10), _answer(20), _answer(30)])
        analyzer = LinkAnalyzer(provider, delay=1.0, sleep=sleep)

        inputs = [_input(f"https://example.org/{i}") for i in range(3)]
        results = analyzer.analyze_batch(inputs)

        assert [r.priority_score for r in results] == [10, 20, 30]
        assert sleep.calls == [1.0, 1.0]
        assert [f"https://example.org/{i}" in p for i, p in enumerate(provider.prompts)] == [
            True,
            True,
            True,
        ]

    def test_one_failure_does_not_stop_batch(self) -> None:
        provider = ScriptedProvider([_answer(10), TransportError("down"), _answer(30)])
        analyzer = LinkAnalyzer(provider, delay=0)

        results = analyzer.analyze_batch([_input(f"https://example.org/{i}") for i in range(3)])

        assert len(results) == 3
        assert results[0].priority_score == 10
        assert results[1].link_purpose == FALLBACK_LINK_PURPOSE
        assert results[2].priority_score == 30

    def test_single_input_does_not_sleep(self) -> None:
        sleep = SleepRecorder()
        LinkAnalyzer(ScriptedProvider([_answer()]), delay=1.0, sleep=sleep).analyze_batch(
            [_input()]
        )
        assert sleep.calls == []

    def test_empty_batch(self) -> None:
        assert LinkAnalyzer(ScriptedProvider([]), delay=1.0).analyze_batch([]) == []

    def test_default_delay_from_settings(self, monkeypatch) -> None:
        import linkmedic.config as cfg

        monkeypatch.setattr(cfg.settings, "analysis_delay", 2.5)
        sleep = SleepRecorder()
        analyzer = LinkAnalyzer(ScriptedProvider([_answer(), _answer()]), sleep=sleep)
        analyzer.analyze_batch([_input(), _input()])
        assert sleep.calls == [2.5]


class TestConnection:
    def test_ok(self) -> None:
        assert LinkAnalyzer(ScriptedProvider(["OK"]), delay=0).test_connection() is True

    def test_failure(self) -> None:
        provider = ScriptedProvider([TransportError("refused")])
        assert LinkAnalyzer(provider, delay=0).test_connection() is False


class TestPrompt:
    def test_required_details(self) -> None:
        prompt = build_analysis_prompt(_input())
        assert "Broken URL: https://example.org/programs-old" in prompt
        assert "HTTP Status Code: 404" in prompt
        assert "Found on page: https://example.org/" in prompt
        assert 'Link text: "Our Programs"' in prompt
        assert "Return ONLY one valid JSON object" in prompt

    def test_unknown_status_and_optional_fields_omitted(self) -> None:
        data = BrokenLinkInput(
            broken_url="https://example.org/x",
            status_code=None,
            found_on_url="https://example.org/",
        )
        prompt = build_analysis_prompt(data)
        assert "HTTP Status Code: unknown" in prompt
        assert "Link text" not in prompt
        assert "HTML context" not in prompt
        assert "Page title" not in prompt

    def test_optional_fields_included(self) -> None:
        data = BrokenLinkInput(
            broken_url="https://example.org/x",
            status_code=410,
            found_on_url="https://example.org/",
            found_on_title="Welcome",
            html_context='<a href="/x">X</a>',
            surrounding_text="Find out more",
        )
        prompt = build_analysis_prompt(data)
        assert "Page title: Welcome" in prompt
        assert 'HTML context: <a href="/x">X</a>' in prompt
        assert "Surrounding text: Find out more" in prompt
