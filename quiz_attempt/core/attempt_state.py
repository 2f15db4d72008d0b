"""Immutable snapshot of an in-progress quiz attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from quiz_attempt.core.models import Question, QuizDescriptor
from quiz_attempt.core.services.scoring import has_passed, max_score, score_percentage


class AttemptStatus(str, Enum):
    """Lifecycle of one attempt. ``finished`` and ``error`` are terminal."""

    INITIAL = "initial"
    LOADING = "loading"
    ACTIVE = "active"
    FINISHED = "finished"
    ERROR = "error"


def _no_answers() -> Mapping[str, int]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class AttemptState:
    """One point-in-time view of an attempt.

    Instances are never modified; every transition produces a new snapshot via
    ``dataclasses.replace``. Tallies and ``score`` are only meaningful once the
    status is ``finished`` and stay zero before that.
    """

    quiz: QuizDescriptor
    questions: tuple[Question, ...] = ()
    status: AttemptStatus = AttemptStatus.INITIAL
    current_question_index: int = 0
    user_answers: Mapping[str, int] = field(default_factory=_no_answers)
    seconds_remaining: int = 0
    error: str | None = None
    total_correct: int = 0
    total_incorrect: int = 0
    total_unanswered: int = 0
    score: int = 0

    @classmethod
    def initial(cls, quiz: QuizDescriptor) -> AttemptState:
        return cls(quiz=quiz, seconds_remaining=quiz.duration_seconds)

    @property
    def current_question(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.current_question_index]

    @property
    def is_terminal(self) -> bool:
        return self.status in (AttemptStatus.FINISHED, AttemptStatus.ERROR)

    @property
    def answered_count(self) -> int:
        return len(self.user_answers)

    def is_answered(self, question_id: str) -> bool:
        return question_id in self.user_answers

    @property
    def max_score(self) -> int:
        return max_score(len(self.questions), self.quiz.marks_per_question)

    @property
    def percentage(self) -> float:
        return score_percentage(self.score, self.max_score)

    @property
    def passed(self) -> bool:
        return self.status is AttemptStatus.FINISHED and has_passed(self.percentage)
