import pytest

from quiz_attempt.core.models import Question
from quiz_attempt.core.services.scoring import (
    ScoreTally,
    has_passed,
    max_score,
    score_attempt,
    score_percentage,
)


def test_scores_mixed_answers(questions: list[Question]) -> None:
    tally = score_attempt(questions, {"q1": 0, "q2": 0}, marks_per_question=2)
    assert tally == ScoreTally(total_correct=1, total_incorrect=1, total_unanswered=1, score=2)


def test_no_answers_leaves_everything_unanswered(questions: list[Question]) -> None:
    tally = score_attempt(questions, {}, marks_per_question=2)
    assert tally == ScoreTally(total_correct=0, total_incorrect=0, total_unanswered=3, score=0)


def test_all_correct(questions: list[Question]) -> None:
    tally = score_attempt(questions, {"q1": 0, "q2": 1, "q3": 2}, marks_per_question=5)
    assert tally.total_correct == 3
    assert tally.score == 15


def test_unknown_question_ids_are_ignored(questions: list[Question]) -> None:
    tally = score_attempt(questions, {"q1": 0, "ghost": 1}, marks_per_question=1)
    assert tally == ScoreTally(total_correct=1, total_incorrect=0, total_unanswered=2, score=1)


@pytest.mark.parametrize(
    "answers",
    [{}, {"q1": 3}, {"q1": 0, "q2": 1}, {"q1": 1, "q2": 2, "q3": 3}, {"q3": 2, "extra": 0}],
)
def test_tallies_cover_every_question(questions: list[Question], answers: dict[str, int]) -> None:
    tally = score_attempt(questions, answers, marks_per_question=3)
    assert tally.total_correct + tally.total_incorrect + tally.total_unanswered == len(questions)
    assert tally.score == tally.total_correct * 3


def test_empty_question_set() -> None:
    assert score_attempt([], {"q1": 0}, marks_per_question=1) == ScoreTally()


def test_percentage_and_pass_mark() -> None:
    assert max_score(3, 2) == 6
    assert score_percentage(2, 6) == pytest.approx(33.333, rel=1e-3)
    assert score_percentage(5, 0) == 0.0
    assert not has_passed(39.9)
    assert has_passed(40.0)
