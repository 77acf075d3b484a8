"""FastAPI dependency injection module.

Provides singleton instances of services for API routes.
Uses lifespan events for initialization and cleanup.
"""

import logging
from typing import Annotated

from fastapi import Depends

from kanjideck.composition import (
    ReviewServiceAdapter,
    create_review_service,
    create_review_session,
)
from kanjideck.config import get_review_adapter_type
from kanjideck.domain.services.review_session import ReviewSession

logger = logging.getLogger(__name__)


# Singletons stored at module level
_review_service: ReviewServiceAdapter | None = None
_review_session: ReviewSession | None = None


async def init_dependencies() -> None:
    """Initialize all singleton dependencies.

    Called during FastAPI lifespan startup.
    """
    global _review_service, _review_session

    adapter_type = get_review_adapter_type()
    print(f"[API] Using '{adapter_type}' review adapter")
    _review_service = create_review_service(adapter_type)
    _review_session = create_review_session(_review_service)


async def cleanup_dependencies() -> None:
    """Cleanup dependencies on shutdown.

    Called during FastAPI lifespan shutdown.
    Lets running deliveries finish, then closes connections.
    """
    global _review_service, _review_session

    if _review_session is not None:
        submissions = _review_session.submissions
        await submissions.join()
        if submissions.submission_errors:
            logger.warning(
                f"Shutting down with {len(submissions.submission_errors)} undelivered reviews"
            )

    if _review_service is not None:
        await _review_service.close()

    _review_service = None
    _review_session = None


def get_review_session() -> ReviewSession:
    """Dependency: Get ReviewSession instance."""
    if _review_session is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies first.")
    return _review_session


# Type aliases for dependency injection
ReviewSessionDep = Annotated[ReviewSession, Depends(get_review_session)]
