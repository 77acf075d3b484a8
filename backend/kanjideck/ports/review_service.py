"""Port interfaces for the remote review service (WaniKani)."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from kanjideck.domain.entities.review import Review
from kanjideck.domain.entities.subject import Subject
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.infrastructure.retry import RetryableError


class ReviewServiceError(Exception):
    """Base error for remote review service failures (generic, retryable by the user)."""

    pass


class InvalidCredentialsError(ReviewServiceError):
    """API key missing, invalid or expired. Needs new credentials upstream."""

    pass


class TransientDeliveryError(ReviewServiceError):
    """Network timeout or connection failure."""

    pass


class RateLimitedError(ReviewServiceError, RetryableError):
    """Server asked us to slow down (HTTP 429). Retried automatically."""

    pass


class LoadFailureError(ReviewServiceError):
    """Initial bulk fetch of reviews failed. No session can start."""

    pass


class NoReviewsError(LoadFailureError):
    """Nothing is due for review right now."""

    pass


@dataclass
class LoadedReviews:
    """Result of the initial bulk fetch."""

    reviews: list[Review] = field(default_factory=list)
    subjects: list[Subject] = field(default_factory=list)


@runtime_checkable
class CredentialProvider(Protocol):
    """Port supplying the bearer token for remote calls.

    Called on every request; implementations decide where the key lives.
    """

    async def get_api_key(self) -> str:
        """Get the API key.

        Raises:
            InvalidCredentialsError: If no key is available
        """
        ...


@runtime_checkable
class ReviewsLoader(Protocol):
    """Port for the initial bulk fetch of due reviews and their subjects."""

    async def load_reviews(self) -> LoadedReviews:
        """Load every review available now, with the subjects they reference.

        Raises:
            InvalidCredentialsError: If the API key is rejected
            ReviewServiceError: On any other failure
        """
        ...


@runtime_checkable
class ReviewCompletionService(Protocol):
    """Port for reporting completed reviews."""

    async def submit_review(self, completion: ReviewCompletion) -> Review | None:
        """Report one completed review.

        Args:
            completion: Review result to deliver

        Returns:
            Updated review carrying the new SRS stage, or None if the
            service does not report it

        Raises:
            InvalidCredentialsError: If the API key is rejected
            RateLimitedError: If the server throttles the request
            TransientDeliveryError: On network failure
            ReviewServiceError: On any other failure
        """
        ...
