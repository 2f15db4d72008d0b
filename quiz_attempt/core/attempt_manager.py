"""Business logic for managing live quiz attempts shared with the API layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging
from threading import Lock
from uuid import uuid4

from quiz_attempt.constants.quiz_constants import ATTEMPT_RETENTION_SECONDS
from quiz_attempt.core.attempt_state import AttemptState
from quiz_attempt.core.models import QuizDescriptor
from quiz_attempt.core.services.attempt_session import AttemptSession
from quiz_attempt.core.services.content_store import QuizCatalog, QuizNotFoundError
from quiz_attempt.core.services.tick_scheduler import ThreadTickScheduler, TickScheduler

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AttemptNotFoundError(LookupError):
    """Raised when an attempt id does not belong to a live attempt."""


@dataclass(slots=True)
class AttemptRecord:
    """A live attempt together with who opened it and when."""

    attempt_id: str
    session: AttemptSession
    student_id: str | None = None
    opened_at: datetime = field(default_factory=_utc_now)
    ended_at: datetime | None = None

    def track_end(self, state: AttemptState) -> None:
        if state.is_terminal and self.ended_at is None:
            self.ended_at = _utc_now()

    def is_stale(self, now: datetime, retention: timedelta) -> bool:
        """True once a finished or failed attempt outlived ``retention``.

        Attempts that never ended are considered abandoned once the quiz
        duration plus ``retention`` has passed since opening.
        """
        if self.ended_at is not None:
            return now - self.ended_at >= retention
        duration = timedelta(seconds=self.session.state.quiz.duration_seconds)
        return now - self.opened_at >= duration + retention


class AttemptManager:
    """Facade over the quiz catalog and the attempts currently in progress.

    Ended attempts stay readable for ``retention_seconds`` so the client can
    fetch the result, then get dropped by :meth:`purge_stale_attempts`, which
    also runs whenever a new attempt is opened.
    """

    def __init__(
        self,
        catalog: QuizCatalog,
        scheduler: TickScheduler | None = None,
        retention_seconds: float = ATTEMPT_RETENTION_SECONDS,
    ) -> None:
        self._lock = Lock()
        self._catalog = catalog
        self._scheduler = scheduler or ThreadTickScheduler()
        self._retention = timedelta(seconds=retention_seconds)
        self._attempts: dict[str, AttemptRecord] = {}

    # --- Catalog Delegation ---

    def list_published_quizzes(self) -> list[QuizDescriptor]:
        return self._catalog.list_quizzes(published_only=True)

    def get_published_quiz(self, quiz_id: str) -> QuizDescriptor:
        quiz = self._catalog.get_quiz(quiz_id)
        if not quiz.is_published:
            raise QuizNotFoundError(f"Quiz '{quiz_id}' is not published.")
        return quiz

    # --- Attempt Lifecycle ---

    def open_attempt(self, quiz_id: str, student_id: str | None = None) -> AttemptRecord:
        """Create a fresh, not yet started session for a published quiz."""
        quiz = self.get_published_quiz(quiz_id)
        self.purge_stale_attempts()
        session = AttemptSession(quiz=quiz, content_store=self._catalog, scheduler=self._scheduler)
        record = AttemptRecord(attempt_id=uuid4().hex, session=session, student_id=student_id)
        session.subscribe(record.track_end)
        with self._lock:
            self._attempts[record.attempt_id] = record
        logger.info("Opened attempt %s of quiz '%s'", record.attempt_id, quiz_id)
        return record

    def get_attempt(self, attempt_id: str) -> AttemptRecord:
        with self._lock:
            record = self._attempts.get(attempt_id)
        if record is None:
            raise AttemptNotFoundError(f"Attempt '{attempt_id}' not found.")
        return record

    def get_session(self, attempt_id: str) -> AttemptSession:
        return self.get_attempt(attempt_id).session

    def close_attempt(self, attempt_id: str) -> None:
        """Dispose of the attempt's session and forget it."""
        with self._lock:
            record = self._attempts.pop(attempt_id, None)
        if record is None:
            raise AttemptNotFoundError(f"Attempt '{attempt_id}' not found.")
        record.session.dispose()
        logger.info("Closed attempt %s", attempt_id)

    def purge_stale_attempts(self, now: datetime | None = None) -> int:
        """Dispose and forget every stale attempt; return how many were dropped."""
        now = now or _utc_now()
        with self._lock:
            stale = [record for record in self._attempts.values() if record.is_stale(now, self._retention)]
            for record in stale:
                del self._attempts[record.attempt_id]
        for record in stale:
            record.session.dispose()
        if stale:
            logger.info("Purged %d stale attempts", len(stale))
        return len(stale)

    def close_all(self) -> None:
        with self._lock:
            records = list(self._attempts.values())
            self._attempts.clear()
        for record in records:
            record.session.dispose()

    def attempt_count(self) -> int:
        with self._lock:
            return len(self._attempts)
