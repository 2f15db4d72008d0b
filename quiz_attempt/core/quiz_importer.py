"""Utilities for importing quizzes from a human-friendly text file.

File format (blocks separated by blank lines or '---'):

    QUIZ: Title of the quiz          (optional header block, must come first)
    ID: algebra-basics               (defaults to the file name without suffix)
    SUBJECT: math
    AUTHOR: teacher-uid
    DURATION: minutes
    MARKS: marks awarded per correct answer
    STATUS: draft|published

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    ID: q-identifier                 (optional, defaults to q<position>)
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D

Example:

    QUIZ: Arithmetic warm-up
    DURATION: 1
    MARKS: 2
    STATUS: published

    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 5
    D: 22
    CORRECT: B
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from pathlib import Path
import re

from quiz_attempt.constants.quiz_constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_MARKS_PER_QUESTION,
)
from quiz_attempt.core.models import PublicationStatus, Question, QuizDescriptor


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path
    quiz: QuizDescriptor
    questions: list[Question]


_OPTION_ORDER = ["A", "B", "C", "D"]
_MULTILINE_MARKERS = {"Q", *_OPTION_ORDER}
_MARKER_PATTERN = re.compile(r"^(Q|ID|CORRECT|[A-D])\s*:(.*)$", re.IGNORECASE)
_HEADER_KEYS = {"QUIZ", "ID", "SUBJECT", "AUTHOR", "DURATION", "MARKS", "STATUS"}


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    quiz, questions = parse_quiz_text(text, default_quiz_id=file_path.stem)
    return ImportedQuiz(source_path=file_path, quiz=quiz, questions=questions)


def parse_quiz_text(text: str, default_quiz_id: str) -> tuple[QuizDescriptor, list[Question]]:
    blocks = _split_blocks(text)
    header: dict[str, str] = {}
    if blocks and blocks[0].lstrip().upper().startswith("QUIZ:"):
        header = _parse_header(blocks.pop(0))

    questions = [_parse_block(block, position) for position, block in enumerate(blocks, start=1)]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    seen_ids: set[str] = set()
    for question in questions:
        if question.id in seen_ids:
            raise QuizImportError(f"Duplicate question ID '{question.id}'.")
        seen_ids.add(question.id)

    quiz_id = header.get("ID") or default_quiz_id
    try:
        quiz = QuizDescriptor(
            id=quiz_id,
            title=header.get("QUIZ") or quiz_id,
            duration_min=_parse_positive_int(header, "DURATION", DEFAULT_DURATION_MINUTES),
            total_questions=len(questions),
            marks_per_question=_parse_positive_int(header, "MARKS", DEFAULT_MARKS_PER_QUESTION),
            status=_parse_status(header.get("STATUS")),
            subject_id=header.get("SUBJECT", ""),
            created_by=header.get("AUTHOR", ""),
        )
    except ValueError as exc:
        raise QuizImportError(str(exc)) from exc
    return quiz, questions


def _split_blocks(text: str) -> list[str]:
    # Blank lines and '---' lines both separate blocks
    grouped = groupby(text.splitlines(), key=lambda line: line.strip() in ("", "---"))
    return ["\n".join(lines).strip() for is_separator, lines in grouped if not is_separator]


def _parse_header(block: str) -> dict[str, str]:
    header: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        key, separator, value = line.partition(":")
        key = key.strip().upper()
        if not separator or key not in _HEADER_KEYS:
            raise QuizImportError(f"Unknown quiz header line: '{line}'.")
        header[key] = value.strip()
    return header


def _parse_positive_int(header: dict[str, str], key: str, default: int) -> int:
    raw_value = header.get(key)
    if raw_value is None:
        return default
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be an integer.") from exc
    if parsed_value <= 0:
        raise QuizImportError(f"{key} must be a positive integer.")
    return parsed_value


def _parse_status(raw_value: str | None) -> PublicationStatus:
    if not raw_value:
        return PublicationStatus.DRAFT
    try:
        return PublicationStatus(raw_value.strip().lower())
    except ValueError as exc:
        raise QuizImportError("STATUS must be either 'draft' or 'published'.") from exc


def _parse_block(block: str, position: int) -> Question:
    fields: dict[str, list[str]] = {}
    last_marker: str | None = None

    for line in (raw_line.strip() for raw_line in block.splitlines()):
        if not line:
            continue
        match = _MARKER_PATTERN.match(line)
        if match is not None:
            last_marker = match.group(1).upper()
            fields[last_marker] = [match.group(2).strip()]
        elif last_marker in _MULTILINE_MARKERS:
            fields[last_marker].append(line)
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(fields.get("Q", [])).strip()
    if not question_text:
        raise QuizImportError("Question text missing (Q: ...)")

    option_list = ["\n".join(fields.get(letter, [])).strip() for letter in _OPTION_ORDER]
    if any(not option for option in option_list):
        raise QuizImportError("Each question must define four non-empty options (A-D).")

    correct_letter = "".join(fields.get("CORRECT", [])).upper()
    if not correct_letter:
        raise QuizImportError("Each question must define its CORRECT option.")
    if correct_letter not in _OPTION_ORDER:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    question_id = fields.get("ID", [None])[0]
    if question_id == "":
        raise QuizImportError("ID must not be empty.")

    return Question(
        id=question_id or f"q{position}",
        question_text=question_text,
        options=tuple(option_list),
        correct_option_index=_OPTION_ORDER.index(correct_letter),
    )
