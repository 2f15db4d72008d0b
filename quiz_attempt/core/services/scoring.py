"""Scoring of a finished quiz attempt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from quiz_attempt.constants.quiz_constants import PASS_PERCENTAGE
from quiz_attempt.core.models import Question


@dataclass(frozen=True, slots=True)
class ScoreTally:
    """Immutable result of scoring one attempt."""

    total_correct: int = 0
    total_incorrect: int = 0
    total_unanswered: int = 0
    score: int = 0


def score_attempt(
    questions: Sequence[Question],
    user_answers: Mapping[str, int],
    marks_per_question: int,
) -> ScoreTally:
    """Classify every loaded question as correct, incorrect or unanswered.

    Answers keyed by an id that is not among ``questions`` are not counted.
    """
    correct = 0
    incorrect = 0
    unanswered = 0
    for question in questions:
        if question.id not in user_answers:
            unanswered += 1
        elif user_answers[question.id] == question.correct_option_index:
            correct += 1
        else:
            incorrect += 1

    return ScoreTally(
        total_correct=correct,
        total_incorrect=incorrect,
        total_unanswered=unanswered,
        score=correct * marks_per_question,
    )


def max_score(question_count: int, marks_per_question: int) -> int:
    return question_count * marks_per_question


def score_percentage(score: int, maximum: int) -> float:
    if maximum <= 0:
        return 0.0
    return (score / maximum) * 100


def has_passed(percentage: float) -> bool:
    return percentage >= PASS_PERCENTAGE
