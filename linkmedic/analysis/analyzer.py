"""AI-backed broken-link analysis with a deterministic safety net.

``LinkAnalyzer.analyze_one`` never raises: provider failures
(:class:`~linkmedic.errors.TransportError`) and unparseable answers
(:class:`~linkmedic.errors.ValidationError`) both degrade to the rule-based
:func:`~linkmedic.analysis.fallback.fallback_analysis`.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable

from linkmedic.analysis.fallback import fallback_analysis
from linkmedic.analysis.models import AnalysisResult, BrokenLinkInput
from linkmedic.analysis.parsing import parse_analysis_response
from linkmedic.analysis.prompt import build_analysis_prompt
from linkmedic.analysis.providers import AIProvider
from linkmedic.config import settings
from linkmedic.errors import TransportError, ValidationError
from linkmedic.log import get_logger
from linkmedic.ratelimit import RateLimitedRunner

logger = get_logger(__name__)

_PING_PROMPT = 'Respond with just the word "OK" if you can read this.'


class LinkAnalyzer:
    """Analyse broken links through an :class:`AIProvider`.

    Args:
        provider: Text-generation capability.
        delay: Seconds between consecutive provider calls in
            :meth:`analyze_batch`.  Defaults to ``settings.analysis_delay``.
        sleep: Injected sleep function (tests pass a recorder).
    """

    def __init__(
        self,
        provider: AIProvider,
        delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._provider = provider
        self._runner = RateLimitedRunner(
            settings.analysis_delay if delay is None else delay, sleep=sleep
        )

    def analyze_one(self, data: BrokenLinkInput) -> AnalysisResult:
        """Return an analysis for *data*, falling back on any AI failure."""
        prompt = build_analysis_prompt(data)
        try:
            text = self._provider.generate(prompt)
            return parse_analysis_response(text)
        except TransportError as exc:
            logger.warning("[ANALYZE] AI call failed for %s: %s", data.broken_url, exc)
        except ValidationError as exc:
            logger.warning(
                "[ANALYZE] Unusable AI answer for %s: %s", data.broken_url, exc
            )
        except Exception as exc:  # noqa: BLE001
            # Providers outside this package may raise anything.
            logger.warning(
                "[ANALYZE] Unexpected provider error for %s: %r", data.broken_url, exc
            )
        return fallback_analysis(data)

    def analyze_batch(self, inputs: Iterable[BrokenLinkInput]) -> list[AnalysisResult]:
        """Analyse *inputs* strictly one after another, rate-limited.

        The returned list is in input order and has one entry per input.
        """
        return self._runner.run(self.analyze_one, inputs)

    def test_connection(self) -> bool:
        """Return ``True`` if the provider answers a trivial prompt."""
        try:
            reply = self._provider.generate(_PING_PROMPT)
        except Exception as exc:  # noqa: BLE001
            logger.error("[ANALYZE] AI provider connection failed: %s", exc)
            return False
        logger.info("[ANALYZE] AI provider connection successful: %s", reply.strip())
        return True
