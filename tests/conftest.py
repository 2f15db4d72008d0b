import asyncio

import pytest

from quiz_attempt.core.models import PublicationStatus, Question, QuizDescriptor
from quiz_attempt.core.services.attempt_session import AttemptSession

from helpers import ManualTickScheduler, StaticContentStore


@pytest.fixture
def quiz() -> QuizDescriptor:
    return QuizDescriptor(
        id="quiz-1",
        title="Sample quiz",
        duration_min=1,
        total_questions=3,
        marks_per_question=2,
        status=PublicationStatus.PUBLISHED,
    )


@pytest.fixture
def questions() -> list[Question]:
    return [
        Question(id="q1", question_text="First?", options=("a", "b", "c", "d"), correct_option_index=0),
        Question(id="q2", question_text="Second?", options=("a", "b", "c", "d"), correct_option_index=1),
        Question(id="q3", question_text="Third?", options=("a", "b", "c", "d"), correct_option_index=2),
    ]


@pytest.fixture
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture
def store(questions: list[Question]) -> StaticContentStore:
    return StaticContentStore(questions)


@pytest.fixture
def session(quiz: QuizDescriptor, store: StaticContentStore, scheduler: ManualTickScheduler) -> AttemptSession:
    return AttemptSession(quiz=quiz, content_store=store, scheduler=scheduler)


@pytest.fixture
def active_session(session: AttemptSession) -> AttemptSession:
    asyncio.run(session.start())
    return session
