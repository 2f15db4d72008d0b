"""State machine driving one timed quiz attempt."""

from __future__ import annotations

import asyncio
from dataclasses import replace
import logging
from threading import RLock
from types import MappingProxyType
from typing import Callable

from quiz_attempt.constants.quiz_constants import (
    EMPTY_QUIZ_MESSAGE,
    LOADING_CANCELLED_MESSAGE,
    TICK_INTERVAL_SECONDS,
)
from quiz_attempt.core.attempt_state import AttemptState, AttemptStatus
from quiz_attempt.core.models import QuizDescriptor
from quiz_attempt.core.services.content_store import ContentStore
from quiz_attempt.core.services.scoring import score_attempt
from quiz_attempt.core.services.tick_scheduler import TickScheduler, TimerHandle

logger = logging.getLogger(__name__)

StateObserver = Callable[[AttemptState], None]


class AttemptSession:
    """Owns the state of a single quiz attempt from loading to scoring.

    The session moves ``initial -> loading -> active -> finished`` (or
    ``loading -> error``). Mutators called outside their valid status are
    ignored. Every transition replaces the current :class:`AttemptState` and
    notifies subscribers synchronously, in order, on the calling thread.
    Observers must not block or call mutators from inside a notification. An
    observer that raises is logged and skipped; the transition still stands.

    A session is single-use: once it is finished, failed or disposed, create a
    new one to try again.
    """

    def __init__(
        self,
        quiz: QuizDescriptor,
        content_store: ContentStore,
        scheduler: TickScheduler,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self._lock = RLock()
        self._content_store = content_store
        self._scheduler = scheduler
        self._tick_interval = tick_interval_seconds
        self._state = AttemptState.initial(quiz)
        self._observers: list[StateObserver] = []
        self._timer: TimerHandle | None = None
        self._fetch_task: asyncio.Future | None = None
        self._disposed = False

    @property
    def state(self) -> AttemptState:
        with self._lock:
            return self._state

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register ``observer`` for future snapshots and return an unsubscribe callable."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    async def start(self) -> None:
        """Fetch the question set and begin the countdown.

        Only the first call does anything; later calls return immediately.
        """
        with self._lock:
            if self._disposed or self._state.status is not AttemptStatus.INITIAL:
                return
            self._apply(replace(self._state, status=AttemptStatus.LOADING))
            fetch_task = asyncio.ensure_future(
                self._content_store.fetch_questions(self._state.quiz.id)
            )
            self._fetch_task = fetch_task

        try:
            questions = tuple(await fetch_task)
        except asyncio.CancelledError:
            with self._lock:
                if self._disposed:
                    return
                # cancelled by the caller rather than by dispose()
                self._fail(LOADING_CANCELLED_MESSAGE)
            raise
        except Exception as exc:
            logger.warning("Loading questions for quiz '%s' failed: %s", self._state.quiz.id, exc)
            with self._lock:
                if not self._disposed:
                    self._fail(str(exc) or exc.__class__.__name__)
            return
        finally:
            self._fetch_task = None

        with self._lock:
            if self._disposed:
                return
            if not questions:
                self._fail(EMPTY_QUIZ_MESSAGE)
                return
            if len({q.id for q in questions}) != len(questions):
                self._fail("This quiz contains duplicate question IDs.")
                return

            self._apply(
                replace(
                    self._state,
                    questions=questions,
                    status=AttemptStatus.ACTIVE,
                    current_question_index=0,
                    seconds_remaining=self._state.quiz.duration_seconds,
                )
            )
            self._timer = self._scheduler.call_every(self._tick_interval, self._on_tick)
            logger.info(
                "Attempt of quiz '%s' active with %d questions and %d seconds",
                self._state.quiz.id,
                len(questions),
                self._state.seconds_remaining,
            )

    def select_answer(self, question_id: str, option_index: int) -> None:
        with self._lock:
            if not self._is_active():
                return
            question = next((q for q in self._state.questions if q.id == question_id), None)
            if question is None or not 0 <= option_index < len(question.options):
                return
            answers = dict(self._state.user_answers)
            answers[question_id] = option_index
            self._apply(replace(self._state, user_answers=MappingProxyType(answers)))

    def next_question(self) -> None:
        with self._lock:
            if self._is_active():
                self._move_to(self._state.current_question_index + 1)

    def previous_question(self) -> None:
        with self._lock:
            if self._is_active():
                self._move_to(self._state.current_question_index - 1)

    def go_to_question(self, index: int) -> None:
        """Jump to ``index``, clamped to the loaded question range."""
        with self._lock:
            if self._is_active():
                self._move_to(index)

    def submit(self) -> None:
        with self._lock:
            if self._is_active():
                self._finish(forced=False)

    def dispose(self) -> None:
        """Abandon the attempt: cancel loading, stop the clock and go silent."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._disarm_timer()
            fetch_task = self._fetch_task
            self._observers.clear()
        if fetch_task is not None and not fetch_task.done():
            fetch_task.get_loop().call_soon_threadsafe(fetch_task.cancel)

    def _on_tick(self) -> None:
        with self._lock:
            if not self._is_active():
                return
            remaining = self._state.seconds_remaining - 1
            if remaining <= 0:
                self._finish(forced=True)
            else:
                self._apply(replace(self._state, seconds_remaining=remaining))

    def _is_active(self) -> bool:
        return not self._disposed and self._state.status is AttemptStatus.ACTIVE

    def _move_to(self, index: int) -> None:
        last_index = len(self._state.questions) - 1
        clamped = max(0, min(index, last_index))
        if clamped != self._state.current_question_index:
            self._apply(replace(self._state, current_question_index=clamped))

    def _finish(self, forced: bool) -> None:
        self._disarm_timer()
        tally = score_attempt(
            self._state.questions,
            self._state.user_answers,
            self._state.quiz.marks_per_question,
        )
        changes = {"seconds_remaining": 0} if forced else {}
        self._apply(
            replace(
                self._state,
                status=AttemptStatus.FINISHED,
                total_correct=tally.total_correct,
                total_incorrect=tally.total_incorrect,
                total_unanswered=tally.total_unanswered,
                score=tally.score,
                **changes,
            )
        )
        logger.info(
            "Attempt of quiz '%s' %s: %d correct, %d incorrect, %d unanswered, score %d",
            self._state.quiz.id,
            "timed out" if forced else "submitted",
            tally.total_correct,
            tally.total_incorrect,
            tally.total_unanswered,
            tally.score,
        )

    def _fail(self, message: str) -> None:
        self._apply(replace(self._state, status=AttemptStatus.ERROR, error=message))

    def _disarm_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _apply(self, new_state: AttemptState) -> None:
        self._state = new_state
        for observer in list(self._observers):
            try:
                observer(new_state)
            except Exception:
                logger.exception("Attempt observer %r failed on a %s snapshot", observer, new_state.status.value)
