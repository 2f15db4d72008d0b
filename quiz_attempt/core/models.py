"""Domain models for quizzes and their questions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from quiz_attempt.constants.quiz_constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_MARKS_PER_QUESTION,
    DEFAULT_TOTAL_QUESTIONS,
)


class PublicationStatus(str, Enum):
    """Whether students can see a quiz."""

    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question as loaded from the content store."""

    id: str
    question_text: str
    options: tuple[str, ...]
    correct_option_index: int

    def __post_init__(self) -> None:
        # Accept any sequence from callers but always hold a tuple.
        object.__setattr__(self, "options", tuple(self.options))

    @classmethod
    def from_dict(cls, question_id: str, data: Mapping[str, Any]) -> Question:
        return cls(
            id=question_id,
            question_text=data.get("questionText", ""),
            options=tuple(str(option) for option in data.get("options") or ()),
            correct_option_index=int(data.get("correctAnswerIndex", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage; the id is the document key and is not included."""
        return {
            "questionText": self.question_text,
            "options": list(self.options),
            "correctAnswerIndex": self.correct_option_index,
        }


@dataclass(frozen=True, slots=True)
class QuizDescriptor:
    """Quiz metadata; the questions themselves are fetched separately."""

    id: str
    title: str
    duration_min: int = DEFAULT_DURATION_MINUTES
    total_questions: int = DEFAULT_TOTAL_QUESTIONS
    marks_per_question: int = DEFAULT_MARKS_PER_QUESTION
    status: PublicationStatus = PublicationStatus.DRAFT
    subject_id: str = ""
    created_by: str = ""
    created_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.duration_min <= 0:
            raise ValueError("Quiz duration must be a positive number of minutes.")
        if self.marks_per_question <= 0:
            raise ValueError("Marks per question must be a positive integer.")
        if self.total_questions < 0:
            raise ValueError("Total question count cannot be negative.")

    @property
    def duration_seconds(self) -> int:
        return self.duration_min * 60

    @property
    def is_published(self) -> bool:
        return self.status is PublicationStatus.PUBLISHED

    @classmethod
    def from_dict(cls, quiz_id: str, data: Mapping[str, Any]) -> QuizDescriptor:
        """Build a descriptor from a stored document, filling in defaults for missing fields."""
        created_at = data.get("createdAt")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=quiz_id,
            title=data.get("title", ""),
            duration_min=int(data.get("durationMin", DEFAULT_DURATION_MINUTES)),
            total_questions=int(data.get("totalQuestions", DEFAULT_TOTAL_QUESTIONS)),
            marks_per_question=int(data.get("marksPerQuestion", DEFAULT_MARKS_PER_QUESTION)),
            status=PublicationStatus(data.get("status", PublicationStatus.DRAFT.value)),
            subject_id=data.get("subjectId", ""),
            created_by=data.get("createdBy", ""),
            created_at=created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "subjectId": self.subject_id,
            "title": self.title,
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "durationMin": self.duration_min,
            "totalQuestions": self.total_questions,
            "marksPerQuestion": self.marks_per_question,
            "status": self.status.value,
        }
