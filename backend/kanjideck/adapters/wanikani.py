"""WaniKani API v2 adapter for loading and submitting reviews."""

import logging
from typing import Any

import httpx

from kanjideck.domain.entities.review import Review
from kanjideck.domain.entities.subject import Subject
from kanjideck.domain.errors import MalformedInputError
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.infrastructure.retry import (
    DEFAULT_INITIAL_WAIT,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    retry_operation,
)
from kanjideck.ports.review_service import (
    CredentialProvider,
    InvalidCredentialsError,
    LoadedReviews,
    RateLimitedError,
    ReviewServiceError,
    TransientDeliveryError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.wanikani.com/v2/"
API_REVISION = "20170710"
# WaniKani caps filter lists at 1000 IDs per request
SUBJECT_BATCH_SIZE = 1000


class WaniKaniAdapter:
    """WaniKani API adapter implementing ReviewsLoader and ReviewCompletionService.

    Uses lazy client initialization for connection reuse. The API key is
    fetched from the credential provider for every request.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        max_rate_limit_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rate_limit_wait: float = DEFAULT_INITIAL_WAIT,
        rate_limit_jitter: float = DEFAULT_JITTER,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize adapter.

        Args:
            credentials: Source of the bearer token
            base_url: API root URL
            timeout: Request timeout in seconds
            max_rate_limit_attempts: Attempts per page fetch while rate limited
            rate_limit_wait: Initial backoff after a 429 response
            rate_limit_jitter: Maximum random extra backoff
            transport: Optional httpx transport (tests)
        """
        self._credentials = credentials
        self._base_url = base_url
        self._timeout = timeout
        self._max_rate_limit_attempts = max_rate_limit_attempts
        self._rate_limit_wait = rate_limit_wait
        self._rate_limit_jitter = rate_limit_jitter
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy client initialization for connection reuse."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Wanikani-Revision": API_REVISION},
            )
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict:
        """Send an authenticated request and classify failures.

        Args:
            method: HTTP method
            url: Endpoint relative to the base URL, or an absolute page URL
            params: Query parameters
            json: JSON body

        Returns:
            Decoded JSON response

        Raises:
            InvalidCredentialsError: On HTTP 401 or a missing key
            RateLimitedError: On HTTP 429
            TransientDeliveryError: On timeouts and connection errors
            ReviewServiceError: On any other error status
            MalformedInputError: If the body is not a JSON object
        """
        api_key = await self._credentials.get_api_key()
        client = await self._get_client()

        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.TransportError as e:
            raise TransientDeliveryError(f"Network error: {e}") from e

        if response.status_code == 401:
            raise InvalidCredentialsError("Invalid API Key")
        if response.status_code == 429:
            raise RateLimitedError("WaniKani rate limit exceeded")
        if response.is_error:
            raise ReviewServiceError(
                f"WaniKani {method} {url} failed with HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedInputError(f"WaniKani returned invalid JSON for {url}") from e
        if not isinstance(body, dict):
            raise MalformedInputError(f"WaniKani returned unexpected body for {url}")
        return body

    async def _get_collection(self, endpoint: str, params: dict[str, Any]) -> list[dict]:
        """Fetch every page of a collection endpoint.

        Rate-limited pages are retried with backoff.
        """
        resources: list[dict] = []
        url: str | None = endpoint
        page_params: dict[str, Any] | None = params

        while url:
            page = await retry_operation(
                self._request,
                "GET",
                url,
                params=page_params,
                max_attempts=self._max_rate_limit_attempts,
                initial_wait=self._rate_limit_wait,
                jitter=self._rate_limit_jitter,
                retryable_exceptions=(RateLimitedError,),
            )
            resources.extend(page.get("data") or [])
            url = (page.get("pages") or {}).get("next_url")
            # next_url already carries the query string
            page_params = None

        return resources

    async def load_reviews(self) -> LoadedReviews:
        """Load assignments available for review and their subjects."""
        assignments = await self._get_collection(
            "assignments", {"immediately_available_for_review": "true"}
        )
        reviews = [Review.from_api(resource) for resource in assignments]

        subject_ids = list(dict.fromkeys(review.subject_id for review in reviews))
        subjects: list[Subject] = []
        for start in range(0, len(subject_ids), SUBJECT_BATCH_SIZE):
            batch = subject_ids[start : start + SUBJECT_BATCH_SIZE]
            resources = await self._get_collection(
                "subjects", {"ids": ",".join(str(i) for i in batch)}
            )
            subjects.extend(Subject.from_api(resource) for resource in resources)

        logger.info(f"Loaded {len(reviews)} reviews and {len(subjects)} subjects")
        return LoadedReviews(reviews=reviews, subjects=subjects)

    async def submit_review(self, completion: ReviewCompletion) -> Review | None:
        """Create a review record for a completed assignment.

        Returns:
            Updated assignment with its new SRS stage, or None if the server
            did not send it back
        """
        body = await self._request(
            "POST",
            "reviews",
            json={
                "review": {
                    "assignment_id": completion.review_id,
                    "incorrect_meaning_answers": completion.incorrect_meaning_count,
                    "incorrect_reading_answers": completion.incorrect_reading_count,
                }
            },
        )

        assignment = (body.get("resources_updated") or {}).get("assignment")
        if assignment is None:
            logger.warning(f"No updated assignment returned for review {completion.review_id}")
            return None
        return Review.from_api(assignment)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
