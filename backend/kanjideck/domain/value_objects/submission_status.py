"""Submission status value objects for the delivery state machine."""

from enum import StrEnum


class SubmissionStatus(StrEnum):
    """Lifecycle of a submission task.

    State machine:
        PENDING -> IN_FLIGHT -> SUCCEEDED
                       |
                       v
                    FAILED -> IN_FLIGHT (user retry)
                       |
                       v
                    IGNORED (user ignore)

    States:
        PENDING: Queued, delivery not started yet
        IN_FLIGHT: Remote call in progress
        FAILED: Delivery failed, waiting for the user to retry or ignore
        IGNORED: Given up by the user, result never reached the server
        SUCCEEDED: Delivered
    """

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    FAILED = "failed"
    IGNORED = "ignored"
    SUCCEEDED = "succeeded"

    def is_queued(self) -> bool:
        """Check if the task belongs to the visible submission queue."""
        return self in (SubmissionStatus.PENDING, SubmissionStatus.IN_FLIGHT)

    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self in (SubmissionStatus.SUCCEEDED, SubmissionStatus.IGNORED)


class SubmissionFailure(StrEnum):
    """Why the last delivery attempt of a task failed."""

    INVALID_CREDENTIALS = "invalid_credentials"  # user must re-enter the API key
    TRANSIENT = "transient"  # network trouble, retry later
    GENERIC = "generic"  # server rejected or unknown error
