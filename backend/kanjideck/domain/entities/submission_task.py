"""Submission task entity for queued review deliveries."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from kanjideck.domain.entities.review import Review
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.domain.value_objects.submission_status import (
    SubmissionFailure,
    SubmissionStatus,
)

VALID_TRANSITIONS: dict[SubmissionStatus, set[SubmissionStatus]] = {
    SubmissionStatus.PENDING: {SubmissionStatus.IN_FLIGHT},
    SubmissionStatus.IN_FLIGHT: {SubmissionStatus.SUCCEEDED, SubmissionStatus.FAILED},
    SubmissionStatus.FAILED: {SubmissionStatus.IN_FLIGHT, SubmissionStatus.IGNORED},
    SubmissionStatus.SUCCEEDED: set(),  # Terminal
    SubmissionStatus.IGNORED: set(),  # Terminal
}


@dataclass
class SubmissionTask:
    """Durable record of a completed review waiting to be delivered.

    The payload never changes after creation; retries resend it as-is.

    Attributes:
        completion: Payload delivered to the server
        task_id: Unique task identifier (UUID v4)
        status: Current delivery state
        failure: Kind of the last failure, if any
        error_message: Message of the last failure, if any
        attempts: Delivery attempts started so far
        updated_review: Review returned by the server on success
        created_at: When the review was completed
    """

    completion: ReviewCompletion
    task_id: str = field(default_factory=lambda: str(uuid4()))
    status: SubmissionStatus = SubmissionStatus.PENDING
    failure: SubmissionFailure | None = None
    error_message: str | None = None
    attempts: int = 0
    updated_review: Review | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def review_id(self) -> int:
        return self.completion.review_id

    @property
    def subject_id(self) -> int:
        return self.completion.subject_id

    @property
    def incorrect_meaning_count(self) -> int:
        return self.completion.incorrect_meaning_count

    @property
    def incorrect_reading_count(self) -> int:
        return self.completion.incorrect_reading_count

    def transition_to(self, new_status: SubmissionStatus) -> None:
        """Move the task to a new status.

        Raises:
            ValueError: If the transition is invalid
        """
        allowed = VALID_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise ValueError(
                f"Invalid transition from {self.status} to {new_status}. Allowed: {allowed}"
            )
        self.status = new_status

    def start_attempt(self) -> None:
        """Mark a delivery attempt as started."""
        self.transition_to(SubmissionStatus.IN_FLIGHT)
        self.attempts += 1
        self.failure = None
        self.error_message = None

    def mark_failed(self, failure: SubmissionFailure, message: str) -> None:
        self.transition_to(SubmissionStatus.FAILED)
        self.failure = failure
        self.error_message = message

    def mark_succeeded(self, updated_review: Review | None) -> None:
        self.transition_to(SubmissionStatus.SUCCEEDED)
        self.updated_review = updated_review

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "task_id": self.task_id,
            **self.completion.to_dict(),
            "status": str(self.status),
            "failure": str(self.failure) if self.failure else None,
            "error_message": self.error_message,
            "attempts": self.attempts,
            "created_at": self.created_at.isoformat(),
        }
