"""Tests for RateLimitedRunner."""

from __future__ import annotations

import pytest

from linkmedic.ratelimit import RateLimitedRunner


class SleepRecorder:
    def __init__(self, log: list | None = None) -> None:
        self.calls: list[float] = []
        self.log = log

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.log is not None:
            self.log.append(("sleep", seconds))


class TestRateLimitedRunner:
    def test_sleeps_between_tasks_only(self) -> None:
        log: list = []
        sleep = SleepRecorder(log)
        runner = RateLimitedRunner(1.0, sleep=sleep)

        def task(item: int) -> int:
            log.append(("task", item))
            return item * 2

        assert runner.run(task, [1, 2, 3]) == [2, 4, 6]
        assert log == [
            ("task", 1),
            ("sleep", 1.0),
            ("task", 2),
            ("sleep", 1.0),
            ("task", 3),
        ]

    def test_zero_delay_never_sleeps(self) -> None:
        sleep = SleepRecorder()
        RateLimitedRunner(0, sleep=sleep).run(lambda x: x, [1, 2, 3])
        assert sleep.calls == []

    def test_empty_input(self) -> None:
        sleep = SleepRecorder()
        assert RateLimitedRunner(1.0, sleep=sleep).run(lambda x: x, []) == []
        assert sleep.calls == []

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError):
            RateLimitedRunner(-1)

    def test_task_error_propagates_and_stops(self) -> None:
        seen: list[int] = []

        def task(item: int) -> int:
            seen.append(item)
            if item == 2:
                raise RuntimeError("bad item")
            return item

        with pytest.raises(RuntimeError):
            RateLimitedRunner(0).run(task, [1, 2, 3])
        assert seen == [1, 2]

    def test_map_is_lazy(self) -> None:
        seen: list[int] = []
        results = RateLimitedRunner(0).map(lambda x: seen.append(x) or x, [1, 2])
        assert seen == []
        assert next(results) == 1
        assert seen == [1]
