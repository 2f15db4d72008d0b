import asyncio
from pathlib import Path

import pytest

from quiz_attempt.core.models import PublicationStatus, Question, QuizDescriptor
from quiz_attempt.core.services.content_store import QuizCatalog, QuizNotFoundError


def _question(question_id: str, correct: int = 0) -> Question:
    return Question(id=question_id, question_text=f"  {question_id}?  ", options=(" a ", "b"), correct_option_index=correct)


def test_add_quiz_normalizes_and_counts_questions() -> None:
    catalog = QuizCatalog()
    stored = catalog.add_quiz(
        QuizDescriptor(id="quiz", title="Quiz", total_questions=99),
        [_question("q1"), _question("q2", correct=1)],
    )
    assert stored.total_questions == 2
    questions = asyncio.run(catalog.fetch_questions("quiz"))
    assert questions[0].question_text == "q1?"
    assert questions[0].options == ("a", "b")


@pytest.mark.parametrize(
    "question",
    [
        Question(id="q", question_text="  ", options=("a", "b"), correct_option_index=0),
        Question(id="q", question_text="Text", options=("a",), correct_option_index=0),
        Question(id="q", question_text="Text", options=("a", " "), correct_option_index=0),
        Question(id="q", question_text="Text", options=("a", "b"), correct_option_index=2),
        Question(id="", question_text="Text", options=("a", "b"), correct_option_index=0),
    ],
)
def test_add_quiz_rejects_invalid_questions(question: Question) -> None:
    with pytest.raises(ValueError):
        QuizCatalog().add_quiz(QuizDescriptor(id="quiz", title="Quiz"), [question])


def test_add_quiz_rejects_duplicate_ids() -> None:
    with pytest.raises(ValueError):
        QuizCatalog().add_quiz(QuizDescriptor(id="quiz", title="Quiz"), [_question("q1"), _question("q1")])


def test_unknown_quiz_raises() -> None:
    catalog = QuizCatalog()
    with pytest.raises(QuizNotFoundError):
        catalog.get_quiz("missing")
    with pytest.raises(QuizNotFoundError):
        asyncio.run(catalog.fetch_questions("missing"))


def test_list_quizzes_filters_drafts() -> None:
    catalog = QuizCatalog()
    catalog.add_quiz(QuizDescriptor(id="b", title="Beta", status=PublicationStatus.PUBLISHED), [_question("q1")])
    catalog.add_quiz(QuizDescriptor(id="a", title="alpha", status=PublicationStatus.PUBLISHED), [_question("q1")])
    catalog.add_quiz(QuizDescriptor(id="d", title="Draft"), [_question("q1")])

    assert [quiz.id for quiz in catalog.list_quizzes()] == ["a", "b"]
    assert len(catalog.list_quizzes(published_only=False)) == 3


def test_load_directory(tmp_path: Path) -> None:
    (tmp_path / "one.txt").write_text(
        "QUIZ: One\nSTATUS: published\n\nQ: Pick A\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n",
        encoding="utf-8",
    )
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")

    loaded = QuizCatalog().load_directory(tmp_path)

    assert [quiz.id for quiz in loaded] == ["one"]
    assert loaded[0].total_questions == 1
