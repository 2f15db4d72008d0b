"""Static metadata describing QuizAttempt."""

APP_NAME = "QuizAttempt"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "QuizAttempt runs timed multiple-choice quiz attempts for students: it loads a fixed "
    "question set, counts down the quiz duration, records answers and scores the result."
)
