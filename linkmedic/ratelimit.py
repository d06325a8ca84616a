"""Sequential task runner with a fixed pause between tasks.

Third-party services (the AI provider, the Wayback Machine) throttle bursty
clients, and deterministic ordering keeps scans reproducible.  Rather than
sprinkling ``time.sleep`` through loops, callers push work through a
:class:`RateLimitedRunner`: a queue of one that runs each task to completion,
waits ``delay`` seconds, then starts the next.  No pause follows the last task.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, Iterator, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class RateLimitedRunner:
    """Run tasks one at a time, ``delay`` seconds apart.

    Args:
        delay: Seconds to wait between the end of one task and the start of
            the next.  ``0`` disables waiting.
        sleep: Sleep function; tests pass a recorder instead of ``time.sleep``.
    """

    def __init__(self, delay: float, sleep: Callable[[float], None] = time.sleep) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay!r}")
        self.delay = delay
        self._sleep = sleep

    def map(self, task: Callable[[T], R], items: Iterable[T]) -> Iterator[R]:
        """Yield ``task(item)`` for each item, in order.

        Exceptions raised by *task* propagate to the consumer; wrap the task
        if one failure must not stop the rest.
        """
        pending = list(items)
        for index, item in enumerate(pending):
            yield task(item)
            if self.delay and index < len(pending) - 1:
                self._sleep(self.delay)

    def run(self, task: Callable[[T], R], items: Iterable[T]) -> list[R]:
        """Eager form of :meth:`map`."""
        return list(self.map(task, items))
