"""FastAPI server that exposes quiz attempts to the student client."""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel
import uvicorn

from quiz_attempt.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quiz_attempt.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_attempt.core.attempt_manager import AttemptManager, AttemptNotFoundError
from quiz_attempt.core.attempt_state import AttemptState, AttemptStatus
from quiz_attempt.core.markdown_math_renderer import renderer
from quiz_attempt.core.models import QuizDescriptor
from quiz_attempt.core.services.attempt_session import AttemptSession
from quiz_attempt.core.services.content_store import QuizNotFoundError


class StartPayload(BaseModel):
    """Optional identity of the student opening an attempt."""

    student_id: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for a selected option."""

    question_id: str
    option_index: int


class JumpPayload(BaseModel):
    """Payload schema for jumping to a question by position."""

    index: int


def format_clock(seconds: int) -> str:
    """Format a second count as ``MM:SS``."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def _serialize_quiz(quiz: QuizDescriptor) -> dict[str, object]:
    return {
        "quiz_id": quiz.id,
        "title": quiz.title,
        "subject_id": quiz.subject_id,
        "duration_min": quiz.duration_min,
        "total_questions": quiz.total_questions,
        "marks_per_question": quiz.marks_per_question,
    }


def _serialize_state(attempt_id: str, state: AttemptState) -> dict[str, object]:
    finished = state.status is AttemptStatus.FINISHED
    current_question = None
    question = state.current_question
    if question is not None:
        current_question = {
            "question_id": question.id,
            "question_html": renderer.render_fragment(question.question_text),
            "options": [renderer.render_inline(option) for option in question.options],
            "selected_option_index": state.user_answers.get(question.id),
            # Never reveal the answer key while the clock is running
            "correct_option_index": question.correct_option_index if finished else None,
        }

    result = None
    if finished:
        result = {
            "total_correct": state.total_correct,
            "total_incorrect": state.total_incorrect,
            "total_unanswered": state.total_unanswered,
            "score": state.score,
            "max_score": state.max_score,
            "percentage": round(state.percentage, 1),
            "passed": state.passed,
        }

    return {
        "attempt_id": attempt_id,
        "quiz": _serialize_quiz(state.quiz),
        "status": state.status.value,
        "error": state.error,
        "seconds_remaining": state.seconds_remaining,
        "time_remaining_label": format_clock(state.seconds_remaining),
        "question_count": len(state.questions),
        "current_question_index": state.current_question_index,
        "current_question": current_question,
        "answered_count": state.answered_count,
        "progress": [
            {
                "question_id": q.id,
                "answered": state.is_answered(q.id),
                "current": index == state.current_question_index,
            }
            for index, q in enumerate(state.questions)
        ],
        "result": result,
    }


def _get_attempt_manager_dependency(attempt_manager: AttemptManager):
    def dependency() -> AttemptManager:
        return attempt_manager

    return dependency


def create_api_app(attempt_manager: AttemptManager) -> FastAPI:
    """Create a FastAPI application wired to the provided attempt manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT)
    manager_dep = _get_attempt_manager_dependency(attempt_manager)

    def lookup_session(manager: AttemptManager, attempt_id: str) -> AttemptSession:
        try:
            return manager.get_session(attempt_id)
        except AttemptNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.get("/quizzes")
    def list_quizzes(manager: AttemptManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_serialize_quiz(quiz) for quiz in manager.list_published_quizzes()]

    @app.post("/quizzes/{quiz_id}/attempts", status_code=201)
    async def open_attempt(
        quiz_id: str,
        payload: StartPayload | None = None,
        manager: AttemptManager = Depends(manager_dep),
    ) -> dict[str, object]:
        student_id = payload.student_id if payload else None
        try:
            record = manager.open_attempt(quiz_id, student_id=student_id)
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        await record.session.start()
        return _serialize_state(record.attempt_id, record.session.state)

    @app.get("/attempts/{attempt_id}")
    def get_attempt(attempt_id: str, manager: AttemptManager = Depends(manager_dep)) -> dict[str, object]:
        session = lookup_session(manager, attempt_id)
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/answers")
    def select_answer(
        attempt_id: str,
        payload: AnswerPayload,
        manager: AttemptManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session = lookup_session(manager, attempt_id)
        session.select_answer(payload.question_id, payload.option_index)
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/next")
    def next_question(attempt_id: str, manager: AttemptManager = Depends(manager_dep)) -> dict[str, object]:
        session = lookup_session(manager, attempt_id)
        session.next_question()
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/previous")
    def previous_question(attempt_id: str, manager: AttemptManager = Depends(manager_dep)) -> dict[str, object]:
        session = lookup_session(manager, attempt_id)
        session.previous_question()
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/jump")
    def jump_to_question(
        attempt_id: str,
        payload: JumpPayload,
        manager: AttemptManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session = lookup_session(manager, attempt_id)
        session.go_to_question(payload.index)
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/submit")
    def submit_attempt(attempt_id: str, manager: AttemptManager = Depends(manager_dep)) -> dict[str, object]:
        session = lookup_session(manager, attempt_id)
        session.submit()
        return _serialize_state(attempt_id, session.state)

    @app.delete("/attempts/{attempt_id}", status_code=204)
    def close_attempt(attempt_id: str, manager: AttemptManager = Depends(manager_dep)) -> Response:
        try:
            manager.close_attempt(attempt_id)
        except AttemptNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return Response(status_code=204)

    return app


def run_api_server(
    attempt_manager: AttemptManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the calling thread until uvicorn shuts down."""
    app = create_api_app(attempt_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()
