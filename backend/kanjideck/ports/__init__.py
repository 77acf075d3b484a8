# Ports layer - Abstract interfaces (Protocols)

from .review_service import (
    CredentialProvider,
    InvalidCredentialsError,
    LoadedReviews,
    LoadFailureError,
    NoReviewsError,
    RateLimitedError,
    ReviewCompletionService,
    ReviewServiceError,
    ReviewsLoader,
    TransientDeliveryError,
)

__all__ = [
    "CredentialProvider",
    "ReviewsLoader",
    "ReviewCompletionService",
    "LoadedReviews",
    "ReviewServiceError",
    "InvalidCredentialsError",
    "TransientDeliveryError",
    "RateLimitedError",
    "LoadFailureError",
    "NoReviewsError",
]
