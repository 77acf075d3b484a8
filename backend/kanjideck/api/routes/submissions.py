"""Submission queue API routes (retry / ignore failed deliveries)."""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from kanjideck.api.dependencies import ReviewSessionDep
from kanjideck.api.routes.session import (
    ErrorResponse,
    SubmissionsResponse,
    submissions_response,
)
from kanjideck.domain.services.submission_queue import SubmissionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


class RetryResponse(BaseModel):
    """Response for a retry request."""

    task_id: str
    scheduled: bool


class IgnoreResponse(BaseModel):
    """Response for ignoring failed submissions."""

    ignored: int


@router.get("", response_model=SubmissionsResponse)
async def list_submissions(session: ReviewSessionDep) -> SubmissionsResponse:
    """Get pending/in-flight submissions and failed ones."""
    return submissions_response(session)


@router.post(
    "/{task_id}/retry",
    response_model=RetryResponse,
    responses={404: {"model": ErrorResponse, "description": "Submission not found"}},
)
async def retry_submission(task_id: str, session: ReviewSessionDep) -> RetryResponse:
    """Resend a failed submission with its original payload.

    ``scheduled`` is false when the task is already being delivered.
    """
    try:
        scheduled = session.retry_submission(task_id)
    except SubmissionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": {
                    "code": "SUBMISSION_NOT_FOUND",
                    "message": f"Submission {task_id} not found",
                }
            },
        ) from None
    return RetryResponse(task_id=task_id, scheduled=scheduled)


@router.post("/ignore", response_model=IgnoreResponse)
async def ignore_submission_errors(session: ReviewSessionDep) -> IgnoreResponse:
    """Give up on every failed submission.

    The ignored reviews are never reported to WaniKani.
    """
    ignored = session.ignore_submission_errors()
    return IgnoreResponse(ignored=ignored)
