"""Quiz-related constants shared across core and server layers."""

DEFAULT_DURATION_MINUTES: int = 25
DEFAULT_TOTAL_QUESTIONS: int = 25
DEFAULT_MARKS_PER_QUESTION: int = 1
TICK_INTERVAL_SECONDS: float = 1.0
PASS_PERCENTAGE: float = 40.0
EMPTY_QUIZ_MESSAGE: str = "This quiz has no questions."
LOADING_CANCELLED_MESSAGE: str = "Loading the quiz was cancelled."
ATTEMPT_RETENTION_SECONDS: float = 300.0
