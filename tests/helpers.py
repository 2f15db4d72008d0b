"""Test doubles shared by the suites: a virtual clock and scripted content stores."""

import asyncio
from typing import Callable, Sequence

from quiz_attempt.core.models import Question

class ManualTimer:
    def __init__(self, interval_seconds: float, callback: Callable[[], None]) -> None:
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTickScheduler:
    """Virtual clock: ticks only fire when the test calls ``advance``."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval_seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def armed(self) -> list[ManualTimer]:
        return [timer for timer in self.timers if not timer.cancelled]

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            for timer in self.armed:
                timer.callback()


class StaticContentStore:
    def __init__(self, questions: Sequence[Question]) -> None:
        self.questions = list(questions)
        self.calls: list[str] = []

    async def fetch_questions(self, quiz_id: str) -> Sequence[Question]:
        self.calls.append(quiz_id)
        return self.questions


class FailingContentStore:
    def __init__(self, message: str) -> None:
        self.message = message
        self.calls = 0

    async def fetch_questions(self, quiz_id: str) -> Sequence[Question]:
        self.calls += 1
        raise ConnectionError(self.message)


class BlockingContentStore:
    """Fetch that never completes until cancelled."""

    def __init__(self) -> None:
        self.calls = 0
        self.cancelled = False

    async def fetch_questions(self, quiz_id: str) -> Sequence[Question]:
        self.calls += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []
