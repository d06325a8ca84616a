"""Text-generation providers behind a single ``generate(prompt)`` capability.

Providers
---------
``openai`` (default)
    LangChain ``ChatOpenAI``.  Requires ``OPENAI_API_KEY``; a missing key is
    a :class:`~linkmedic.errors.ConfigurationError` at construction time.

``ollama``
    LangChain ``ChatOllama`` against a local Ollama server.
    Configure via ``OLLAMA_BASE_URL`` and ``OLLAMA_CHAT_MODEL``.

Set ``LLM_PROVIDER=ollama`` in your ``.env`` to switch providers.  Any error
raised while talking to the model surfaces as
:class:`~linkmedic.errors.TransportError`.
"""

from __future__ import annotations

from typing import Any, Protocol

from linkmedic.config import Settings, settings as default_settings
from linkmedic.errors import ConfigurationError, TransportError


class AIProvider(Protocol):
    """Anything that can turn a prompt into raw text."""

    def generate(self, prompt: str) -> str:
        ...


# ---------------------------------------------------------------------------
# LangChain-backed providers
# ---------------------------------------------------------------------------

class ChatModelProvider:
    """Wrap a LangChain chat model as an :class:`AIProvider`."""

    name = "chat-model"

    def __init__(self, llm: Any) -> None:
        self._llm = llm

    def generate(self, prompt: str) -> str:
        try:
            response = self._llm.invoke(prompt)
        except Exception as exc:  # noqa: BLE001
            raise TransportError(f"{self.name} request failed: {exc}") from exc
        text = response.content if hasattr(response, "content") else str(response)
        if not isinstance(text, str):
            # Multi-part content blocks: keep the text parts only.
            text = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in text
            )
        return text


class OpenAIProvider(ChatModelProvider):
    name = "OpenAI"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini") -> None:
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY environment variable is required. "
                "Set it or switch to LLM_PROVIDER=ollama."
            )
        from langchain_openai import ChatOpenAI

        super().__init__(ChatOpenAI(model=model, api_key=api_key, temperature=0))


class OllamaProvider(ChatModelProvider):
    name = "Ollama"

    def __init__(self, model: str, base_url: str = "http://localhost:11434") -> None:
        from langchain_ollama import ChatOllama

        super().__init__(ChatOllama(model=model, base_url=base_url, temperature=0))


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def build_provider(config: Settings | None = None) -> AIProvider:
    """Return the provider selected by ``settings.llm_provider``.

    Raises:
        ConfigurationError: If the provider name is unknown or its credential
            is missing.
    """
    config = config or default_settings
    provider = config.llm_provider.lower()

    if provider == "openai":
        return OpenAIProvider(config.openai_api_key, model=config.openai_chat_model)
    if provider == "ollama":
        return OllamaProvider(config.ollama_chat_model, base_url=config.ollama_base_url)

    raise ConfigurationError(
        f"Unknown LLM_PROVIDER {config.llm_provider!r}. Use: openai | ollama"
    )
