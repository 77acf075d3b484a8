"""Domain value objects - immutable objects without identity."""

from .review_completion import ReviewCompletion
from .review_type import ReviewType
from .session_stats import CardStats, ReviewStats, SessionStats
from .srs_stage import BURNED_SRS_STAGE, SrsStageChange
from .subject_type import SubjectType
from .submission_status import SubmissionFailure, SubmissionStatus

__all__ = [
    "BURNED_SRS_STAGE",
    "CardStats",
    "ReviewCompletion",
    "ReviewStats",
    "ReviewType",
    "SessionStats",
    "SrsStageChange",
    "SubjectType",
    "SubmissionFailure",
    "SubmissionStatus",
]
