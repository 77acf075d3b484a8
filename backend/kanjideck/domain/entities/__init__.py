"""Domain entities - objects with identity."""

from .card import Card, CardDict
from .review import Review
from .review_progress import ReviewProgress
from .review_queue import ReviewQueue
from .subject import Subject
from .submission_task import SubmissionTask

__all__ = [
    "Card",
    "CardDict",
    "Review",
    "ReviewProgress",
    "ReviewQueue",
    "Subject",
    "SubmissionTask",
]
