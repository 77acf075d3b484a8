"""
Composition Root.

Centralized dependency wiring for the application.
All factory functions that instantiate adapters belong here so the domain
never imports from adapters.
"""

import logging

from kanjideck.adapters.credentials import EnvCredentialProvider
from kanjideck.adapters.demo_deck import DemoDeckAdapter
from kanjideck.adapters.wanikani import WaniKaniAdapter
from kanjideck.config import (
    get_http_timeout,
    get_rate_limit_max_attempts,
    get_requeue_incorrect,
    get_wanikani_api_url,
)
from kanjideck.domain.services.review_session import ReviewSession
from kanjideck.domain.services.submission_queue import SubmissionQueue

logger = logging.getLogger(__name__)

ReviewServiceAdapter = WaniKaniAdapter | DemoDeckAdapter


def create_review_service(adapter_type: str) -> ReviewServiceAdapter:
    """Create the adapter playing both loader and completion-service roles.

    Args:
        adapter_type: 'wanikani' or 'demo'

    Raises:
        ValueError: If the adapter type is unknown
    """
    if adapter_type == "demo":
        logger.info("Using demo deck adapter")
        return DemoDeckAdapter()
    if adapter_type == "wanikani":
        base_url = get_wanikani_api_url()
        logger.info(f"Using WaniKani API at {base_url}")
        return WaniKaniAdapter(
            credentials=EnvCredentialProvider(),
            base_url=base_url,
            timeout=get_http_timeout(),
            max_rate_limit_attempts=get_rate_limit_max_attempts(),
        )
    raise ValueError(
        f"Invalid REVIEW_ADAPTER: '{adapter_type}'. Valid options: 'wanikani', 'demo'"
    )


def create_review_session(review_service: ReviewServiceAdapter) -> ReviewSession:
    """Create a ReviewSession with its SubmissionQueue.

    Args:
        review_service: Adapter used to load and to submit reviews

    Returns:
        ReviewSession configured from the environment
    """
    submission_queue = SubmissionQueue(
        review_service=review_service,
        max_rate_limit_attempts=get_rate_limit_max_attempts(),
    )
    return ReviewSession(
        loader=review_service,
        submission_queue=submission_queue,
        requeue_incorrect=get_requeue_incorrect(),
    )
