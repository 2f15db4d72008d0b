"""Content store that supplies quizzes and their question sets."""

from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path
from threading import Lock
from typing import Protocol, Sequence

from quiz_attempt.core.models import Question, QuizDescriptor
from quiz_attempt.core.quiz_importer import load_quiz_from_file

logger = logging.getLogger(__name__)


class QuizNotFoundError(LookupError):
    """Raised when a quiz id is not known to the content store."""


class ContentStore(Protocol):
    async def fetch_questions(self, quiz_id: str) -> Sequence[Question]:
        """Return the question set of ``quiz_id`` or raise on failure."""


class QuizCatalog:
    """In-memory quiz store backed by quiz text files."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, QuizDescriptor] = {}
        self._questions: dict[str, tuple[Question, ...]] = {}

    def add_quiz(self, quiz: QuizDescriptor, questions: Sequence[Question]) -> QuizDescriptor:
        """Validate and store a quiz, replacing any quiz with the same id."""
        prepared = tuple(self._prepare_question(q) for q in questions)
        question_ids = [q.id for q in prepared]
        if len(set(question_ids)) != len(question_ids):
            raise ValueError("Question IDs must be unique within a quiz.")

        stored = replace(quiz, total_questions=len(prepared))
        with self._lock:
            self._quizzes[stored.id] = stored
            self._questions[stored.id] = prepared
        return stored

    def get_quiz(self, quiz_id: str) -> QuizDescriptor:
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(f"Quiz '{quiz_id}' not found.")
        return quiz

    def list_quizzes(self, published_only: bool = True) -> list[QuizDescriptor]:
        with self._lock:
            quizzes = list(self._quizzes.values())
        if published_only:
            quizzes = [quiz for quiz in quizzes if quiz.is_published]
        return sorted(quizzes, key=lambda quiz: quiz.title.lower())

    async def fetch_questions(self, quiz_id: str) -> Sequence[Question]:
        with self._lock:
            questions = self._questions.get(quiz_id)
        if questions is None:
            raise QuizNotFoundError(f"Quiz '{quiz_id}' not found.")
        return questions

    def load_directory(self, directory: Path) -> list[QuizDescriptor]:
        """Import every ``*.txt`` quiz file in ``directory``."""
        loaded: list[QuizDescriptor] = []
        for file_path in sorted(directory.glob("*.txt")):
            imported = load_quiz_from_file(file_path)
            stored = self.add_quiz(imported.quiz, imported.questions)
            logger.info(
                "Imported quiz '%s' (%d questions) from %s",
                stored.id,
                stored.total_questions,
                file_path.name,
            )
            loaded.append(stored)
        return loaded

    @staticmethod
    def _prepare_question(question: Question) -> Question:
        """Validate and normalize a question before storage."""
        cleaned_text = question.question_text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")
        if not question.id:
            raise ValueError("Question ID must not be empty.")

        options = tuple(option.strip() for option in question.options)
        if len(options) < 2:
            raise ValueError("Each question must have at least two options.")
        if any(not option for option in options):
            raise ValueError("Option text cannot be empty.")
        if not 0 <= question.correct_option_index < len(options):
            raise ValueError("Correct option index is out of range.")

        return replace(question, question_text=cleaned_text, options=options)
