# Domain layer - Business logic (NO external dependencies)

from .entities import Card, Review, ReviewProgress, ReviewQueue, Subject, SubmissionTask
from .errors import MalformedInputError, MissingSubjectError, UnknownReviewError
from .value_objects import (
    ReviewCompletion,
    ReviewType,
    SessionStats,
    SrsStageChange,
    SubjectType,
    SubmissionFailure,
    SubmissionStatus,
)

__all__ = [
    "Card",
    "Review",
    "ReviewProgress",
    "ReviewQueue",
    "Subject",
    "SubmissionTask",
    "MalformedInputError",
    "MissingSubjectError",
    "UnknownReviewError",
    "ReviewCompletion",
    "ReviewType",
    "SessionStats",
    "SrsStageChange",
    "SubjectType",
    "SubmissionFailure",
    "SubmissionStatus",
]
