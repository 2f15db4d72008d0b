"""Application entry point for the QuizAttempt server."""

from __future__ import annotations

from pathlib import Path
import sys

from quiz_attempt.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_attempt.core.attempt_manager import AttemptManager
from quiz_attempt.core.services.content_store import QuizCatalog
from quiz_attempt.server.api_server import run_api_server
from quiz_attempt.utils.logging_config import configure_logging

_DEFAULT_QUIZ_DIRECTORY = Path(__file__).resolve().parent / "quizzes"


def main() -> None:
    """Initialize logging, import the quiz files and serve the attempt API."""
    logger = configure_logging()
    quiz_directory = Path(sys.argv[1]) if len(sys.argv) > 1 else _DEFAULT_QUIZ_DIRECTORY
    logger.info("Starting QuizAttempt with quizzes from %s", quiz_directory)

    catalog = QuizCatalog()
    if quiz_directory.is_dir():
        catalog.load_directory(quiz_directory)
    else:
        logger.warning("Quiz directory %s does not exist; no quizzes loaded", quiz_directory)

    attempt_manager = AttemptManager(catalog)
    try:
        run_api_server(attempt_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    finally:
        attempt_manager.close_all()


if __name__ == "__main__":
    main()
