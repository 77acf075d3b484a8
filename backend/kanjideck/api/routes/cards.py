"""Card answering API routes."""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from kanjideck.api.dependencies import ReviewSessionDep
from kanjideck.api.routes.session import ErrorResponse, session_not_started
from kanjideck.domain.services.review_session import CardNotFoundError, SessionNotStartedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cards", tags=["cards"])


class AnswerRequest(BaseModel):
    """Request body for answering a card."""

    correct: bool


class SrsStageChangeResponse(BaseModel):
    """Expected SRS stage advance."""

    current: int
    next: int


class AnswerResponse(BaseModel):
    """Response for an answered card."""

    card_id: str
    review_id: int
    review_completed: bool
    incorrect_meaning_count: int
    incorrect_reading_count: int
    srs_stage_change: SrsStageChangeResponse | None = None
    submission_id: str | None = None
    remaining_count: int


@router.post(
    "/{card_id}/answer",
    response_model=AnswerResponse,
    responses={404: {"model": ErrorResponse, "description": "Card or session not found"}},
)
async def answer_card(
    card_id: str,
    request: AnswerRequest,
    session: ReviewSessionDep,
) -> AnswerResponse:
    """Answer a card.

    Swipe right = correct. When this answer completes its review, the result
    is queued for submission in the background. In wrap-up mode only cards
    of started reviews can be answered.
    """
    try:
        answer = session.answer(card_id, request.correct)
    except SessionNotStartedError:
        raise session_not_started() from None
    except CardNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": {"code": "CARD_NOT_FOUND", "message": str(e)}},
        ) from None

    result = answer.result
    change = result.srs_stage_change
    return AnswerResponse(
        card_id=result.card.card_id,
        review_id=result.review.id,
        review_completed=result.review_completed,
        incorrect_meaning_count=result.incorrect_meaning_count,
        incorrect_reading_count=result.incorrect_reading_count,
        srs_stage_change=(
            SrsStageChangeResponse(current=change.current, next=change.next) if change else None
        ),
        submission_id=answer.submission.task_id if answer.submission else None,
        remaining_count=len(session.visible_queue),
    )
