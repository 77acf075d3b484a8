"""Domain services - orchestration and business logic."""

from .deck_builder import build_deck, index_subjects
from .review_engine import AnswerResult, ReviewSessionEngine
from .review_session import (
    CardNotFoundError,
    ReviewSession,
    SessionAnswer,
    SessionNotStartedError,
    StartSessionResult,
)
from .stats import compute_session_stats
from .submission_queue import SubmissionNotFoundError, SubmissionQueue

__all__ = [
    "build_deck",
    "index_subjects",
    "compute_session_stats",
    "ReviewSessionEngine",
    "AnswerResult",
    "ReviewSession",
    "SessionAnswer",
    "StartSessionResult",
    "SessionNotStartedError",
    "CardNotFoundError",
    "SubmissionQueue",
    "SubmissionNotFoundError",
]
