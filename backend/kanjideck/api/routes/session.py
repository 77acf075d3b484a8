"""Review session API routes."""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from kanjideck.api.dependencies import ReviewSessionDep
from kanjideck.domain.entities.card import Card
from kanjideck.domain.entities.submission_task import SubmissionTask
from kanjideck.domain.errors import MalformedInputError
from kanjideck.domain.services.review_session import ReviewSession, SessionNotStartedError
from kanjideck.domain.value_objects.session_stats import SessionStats
from kanjideck.ports.review_service import (
    InvalidCredentialsError,
    LoadFailureError,
    NoReviewsError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])


# =============================================================================
# Request/Response Models
# =============================================================================


class CardResponse(BaseModel):
    """Card in API response."""

    card_id: str
    review_id: int
    review_type: str
    subject_id: int
    subject_type: str
    characters: str


class GranularityStatsResponse(BaseModel):
    """Counts and percentages for reviews or cards."""

    total: int
    completed: int
    correct: int
    incorrect: int
    correct_percent: float
    incorrect_percent: float
    unfinished: int | None = None


class SessionStatsResponse(BaseModel):
    """Session statistics."""

    reviews: GranularityStatsResponse
    cards: GranularityStatsResponse


class SubmissionResponse(BaseModel):
    """Submission task in API response."""

    task_id: str
    review_id: int
    subject_id: int
    incorrect_meaning_count: int
    incorrect_reading_count: int
    status: str
    failure: str | None = None
    error_message: str | None = None
    attempts: int


class SubmissionsResponse(BaseModel):
    """Visible submission state."""

    queue: list[SubmissionResponse]
    errors: list[SubmissionResponse]


class StartSessionResponse(BaseModel):
    """Response for session start."""

    total_reviews: int
    total_cards: int
    queue: list[CardResponse]
    stats: SessionStatsResponse


class CurrentSessionResponse(BaseModel):
    """Response for current session."""

    wrap_up_mode: bool
    is_queue_clear: bool
    current_card: CardResponse | None
    queue: list[CardResponse]
    stats: SessionStatsResponse
    submissions: SubmissionsResponse


class WrapUpRequest(BaseModel):
    """Request body for toggling wrap-up mode."""

    enabled: bool


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict | None = None


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: ErrorDetail


# =============================================================================
# Converters
# =============================================================================


def card_response(session: ReviewSession, card: Card) -> CardResponse:
    subject_id = session.engine.get_progress(card.review_id).review.subject_id
    subject = session.subjects[subject_id]
    return CardResponse(
        card_id=card.card_id,
        review_id=card.review_id,
        review_type=str(card.review_type),
        subject_id=subject.id,
        subject_type=str(subject.type),
        characters=subject.characters,
    )


def stats_response(stats: SessionStats) -> SessionStatsResponse:
    return SessionStatsResponse.model_validate(stats.to_dict())


def submission_response(task: SubmissionTask) -> SubmissionResponse:
    return SubmissionResponse.model_validate(task.to_dict())


def submissions_response(session: ReviewSession) -> SubmissionsResponse:
    return SubmissionsResponse(
        queue=[submission_response(t) for t in session.submission_queue],
        errors=[submission_response(t) for t in session.submission_errors],
    )


def current_session_response(session: ReviewSession) -> CurrentSessionResponse:
    queue = [card_response(session, card) for card in session.visible_queue]
    return CurrentSessionResponse(
        wrap_up_mode=session.wrap_up_mode,
        is_queue_clear=session.is_queue_clear,
        current_card=queue[0] if queue else None,
        queue=queue,
        stats=stats_response(session.stats()),
        submissions=submissions_response(session),
    )


def session_not_started() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": {
                "code": "SESSION_NOT_STARTED",
                "message": "No review session loaded",
            }
        },
    )


# =============================================================================
# Routes
# =============================================================================


@router.post(
    "/start",
    response_model=StartSessionResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key"},
        404: {"model": ErrorResponse, "description": "No reviews available"},
        500: {"model": ErrorResponse, "description": "Inconsistent review data"},
        503: {"model": ErrorResponse, "description": "WaniKani unavailable"},
    },
)
async def start_session(session: ReviewSessionDep) -> StartSessionResponse:
    """Load due reviews and start (or restart) the review session.

    Half-completed reviews of a previous load are dropped.
    """
    try:
        result = await session.start()
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": {"code": "INVALID_CREDENTIALS", "message": str(e)}},
        ) from None
    except NoReviewsError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": {"code": "NO_REVIEWS", "message": "No reviews available"}},
        ) from None
    except MalformedInputError:
        logger.exception("Loaded review data is inconsistent")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": {
                    "code": "MALFORMED_DATA",
                    "message": "Loaded review data is inconsistent",
                }
            },
        ) from None
    except LoadFailureError as e:
        logger.warning(f"Review load failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": {"code": "LOAD_FAILED", "message": "Cannot load reviews"}},
        ) from None

    return StartSessionResponse(
        total_reviews=result.total_reviews,
        total_cards=result.total_cards,
        queue=[card_response(session, card) for card in session.visible_queue],
        stats=stats_response(session.stats()),
    )


@router.get(
    "/current",
    response_model=CurrentSessionResponse,
    responses={404: {"model": ErrorResponse, "description": "No session loaded"}},
)
async def get_current_session(session: ReviewSessionDep) -> CurrentSessionResponse:
    """Get the visible queue, stats and submission state."""
    if not session.is_started:
        raise session_not_started()
    return current_session_response(session)


@router.put(
    "/wrap-up",
    response_model=CurrentSessionResponse,
    responses={404: {"model": ErrorResponse, "description": "No session loaded"}},
)
async def set_wrap_up_mode(
    request: WrapUpRequest,
    session: ReviewSessionDep,
) -> CurrentSessionResponse:
    """Enable or disable wrap-up mode (only ask reviews with unfinished pairs)."""
    if not session.is_started:
        raise session_not_started()
    session.set_wrap_up_mode(request.enabled)
    return current_session_response(session)


@router.get(
    "/stats",
    response_model=SessionStatsResponse,
    responses={404: {"model": ErrorResponse, "description": "No session loaded"}},
)
async def get_stats(session: ReviewSessionDep) -> SessionStatsResponse:
    """Get completion and correctness statistics."""
    try:
        return stats_response(session.stats())
    except SessionNotStartedError:
        raise session_not_started() from None
