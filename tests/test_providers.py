"""Tests for AI provider construction and the LangChain wrapper."""

from __future__ import annotations

from dataclasses import replace
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from linkmedic.analysis.providers import (
    ChatModelProvider,
    OpenAIProvider,
    build_provider,
)
from linkmedic.config import settings
from linkmedic.errors import ConfigurationError, TransportError


class TestChatModelProvider:
    def test_returns_content(self) -> None:
        llm = MagicMock()
        llm.invoke.return_value = SimpleNamespace(content='{"ok": true}')
        assert ChatModelProvider(llm).generate("hi") == '{"ok": true}'
        llm.invoke.assert_called_once_with("hi")

    def test_joins_content_parts(self) -> None:
        llm = MagicMock()
        llm.invoke.return_value = SimpleNamespace(
            content=[{"type": "text", "text": "{"}, {"type": "text", "text": "}"}]
        )
        assert ChatModelProvider(llm).generate("hi") == "{}"

    def test_errors_become_transport_error(self) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = ConnectionError("refused")
        with pytest.raises(TransportError, match="refused"):
            ChatModelProvider(llm).generate("hi")


class TestBuildProvider:
    def test_openai_requires_key(self) -> None:
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            build_provider(replace(settings, llm_provider="openai", openai_api_key=""))

    def test_openai_provider_direct_requires_key(self) -> None:
        with pytest.raises(ConfigurationError):
            OpenAIProvider("")

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown LLM_PROVIDER"):
            build_provider(replace(settings, llm_provider="bogus"))

    def test_openai_with_key(self) -> None:
        config = replace(
            settings, llm_provider="OpenAI", openai_api_key="sk-test", openai_chat_model="m"
        )
        with patch("langchain_openai.ChatOpenAI") as chat_cls:
            provider = build_provider(config)
        assert isinstance(provider, OpenAIProvider)
        chat_cls.assert_called_once_with(model="m", api_key="sk-test", temperature=0)

    def test_ollama(self) -> None:
        config = replace(
            settings,
            llm_provider="ollama",
            ollama_chat_model="llama3.1:8b",
            ollama_base_url="http://ollama:11434",
        )
        with patch("langchain_ollama.ChatOllama") as chat_cls:
            provider = build_provider(config)
        assert provider.name == "Ollama"
        chat_cls.assert_called_once_with(
            model="llama3.1:8b", base_url="http://ollama:11434", temperature=0
        )
