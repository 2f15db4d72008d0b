from pathlib import Path

import pytest

from quiz_attempt.core.models import PublicationStatus
from quiz_attempt.core.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_text

QUESTION_BLOCK = """Q: What is $2 + 2$?
A: 3
B: 4
C: 5
D: 22
CORRECT: B
"""


def test_load_quiz_with_header(tmp_path: Path) -> None:
    quiz_file = tmp_path / "warmup.txt"
    quiz_file.write_text(
        "QUIZ: Warm-up\nID: warm-1\nSUBJECT: math\nAUTHOR: t-1\nDURATION: 10\nMARKS: 2\nSTATUS: published\n\n"
        + QUESTION_BLOCK
        + "\n---\n\nQ: Multi-line\nquestion text\nID: custom\nA: one\nB: two\nC: three\nD: four\nCORRECT: d\n",
        encoding="utf-8",
    )

    imported = load_quiz_from_file(quiz_file)

    quiz = imported.quiz
    assert imported.source_path == quiz_file
    assert quiz.id == "warm-1"
    assert quiz.title == "Warm-up"
    assert quiz.subject_id == "math"
    assert quiz.created_by == "t-1"
    assert quiz.duration_min == 10
    assert quiz.marks_per_question == 2
    assert quiz.status is PublicationStatus.PUBLISHED
    assert quiz.total_questions == 2

    first, second = imported.questions
    assert first.id == "q1"
    assert first.options == ("3", "4", "5", "22")
    assert first.correct_option_index == 1
    assert second.id == "custom"
    assert second.question_text == "Multi-line\nquestion text"
    assert second.correct_option_index == 3


def test_defaults_without_header() -> None:
    quiz, questions = parse_quiz_text(QUESTION_BLOCK, default_quiz_id="plain")
    assert quiz.id == "plain"
    assert quiz.title == "plain"
    assert quiz.duration_min == 25
    assert quiz.marks_per_question == 1
    assert quiz.status is PublicationStatus.DRAFT
    assert len(questions) == 1


@pytest.mark.parametrize(
    "text",
    [
        "",
        "QUIZ: Only a header\nDURATION: 5\n",
        "Q: Missing options\nA: one\nCORRECT: A\n",
        QUESTION_BLOCK.replace("CORRECT: B\n", ""),
        QUESTION_BLOCK.replace("CORRECT: B", "CORRECT: E"),
        "QUIZ: Bad\nDURATION: zero\n\n" + QUESTION_BLOCK,
        "QUIZ: Bad\nDURATION: -2\n\n" + QUESTION_BLOCK,
        "QUIZ: Bad\nSTATUS: archived\n\n" + QUESTION_BLOCK,
        "QUIZ: Bad\nCOLOR: blue\n\n" + QUESTION_BLOCK,
        "stray text\n" + QUESTION_BLOCK,
        QUESTION_BLOCK + "ID: same\n\n" + QUESTION_BLOCK + "ID: same\n",
    ],
)
def test_invalid_files_raise(text: str) -> None:
    with pytest.raises(QuizImportError):
        parse_quiz_text(text, default_quiz_id="bad")
