"""Submission queue for resilient delivery of completed reviews."""

import asyncio
import logging

from kanjideck.domain.entities.submission_task import SubmissionTask
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.domain.value_objects.submission_status import (
    SubmissionFailure,
    SubmissionStatus,
)
from kanjideck.infrastructure.retry import (
    DEFAULT_INITIAL_WAIT,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    retry_operation,
)
from kanjideck.ports.review_service import (
    InvalidCredentialsError,
    RateLimitedError,
    ReviewCompletionService,
    ReviewServiceError,
    TransientDeliveryError,
)

logger = logging.getLogger(__name__)


class SubmissionNotFoundError(Exception):
    """Raised when no visible task has the given ID."""

    pass


class SubmissionQueue:
    """Delivers completed reviews to the remote service in the background.

    Handles:
    - Fire-and-forget delivery: ``enqueue`` schedules and returns at once
    - Failure surfacing: failed tasks land in ``submission_errors``
    - User recovery: retry one failed task, or ignore all of them

    Failures are never retried on their own. The only automatic retry is
    backoff on rate limiting (HTTP 429), which is the server pacing us and
    not a delivery failure.

    Must be used from a running event loop.
    """

    def __init__(
        self,
        review_service: ReviewCompletionService,
        max_rate_limit_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_wait: float = DEFAULT_INITIAL_WAIT,
        jitter: float = DEFAULT_JITTER,
    ):
        """Initialize submission queue.

        Args:
            review_service: Port for reporting completed reviews
            max_rate_limit_attempts: Attempts per delivery while rate limited
            initial_wait: Initial wait time for exponential backoff
            jitter: Maximum random extra wait between attempts
        """
        self._review_service = review_service
        self._max_rate_limit_attempts = max_rate_limit_attempts
        self._initial_wait = initial_wait
        self._jitter = jitter
        # Tasks not yet succeeded or ignored, in creation order. Resolved
        # tasks are dropped; callers keep the handle returned by enqueue.
        self._tasks: dict[str, SubmissionTask] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        """Number of unresolved (queued or failed) tasks."""
        return len(self._tasks)

    @property
    def submission_queue(self) -> list[SubmissionTask]:
        """Tasks pending or being delivered."""
        return [t for t in self._tasks.values() if t.status.is_queued()]

    @property
    def submission_errors(self) -> list[SubmissionTask]:
        """Tasks whose delivery failed and need a user decision."""
        return [t for t in self._tasks.values() if t.status == SubmissionStatus.FAILED]

    @property
    def is_idle(self) -> bool:
        """Check if no delivery is running."""
        return not self._inflight

    def get_task(self, task_id: str) -> SubmissionTask:
        """Get a visible (queued or failed) task.

        Raises:
            SubmissionNotFoundError: If the task is unknown or already resolved
        """
        task = self._tasks.get(task_id)
        if task is None:
            raise SubmissionNotFoundError(f"Submission {task_id} not found")
        return task

    def enqueue(self, completion: ReviewCompletion) -> SubmissionTask:
        """Queue a completed review and start delivering it.

        Does not wait for the delivery.

        Args:
            completion: Completed review payload

        Returns:
            The created task, in PENDING state
        """
        task = SubmissionTask(completion=completion)
        self._schedule(task)
        self._tasks[task.task_id] = task
        logger.debug(f"Queued submission {task.task_id} for review {task.review_id}")
        return task

    def retry_submission(self, task_id: str) -> bool:
        """Deliver a failed task again, with its original payload.

        A task that is already being delivered ignores the request.

        Args:
            task_id: ID of the failed task

        Returns:
            True if a new delivery attempt was scheduled

        Raises:
            SubmissionNotFoundError: If the task is unknown or already resolved
        """
        task = self.get_task(task_id)

        if task_id in self._inflight or task.status != SubmissionStatus.FAILED:
            logger.debug(f"Ignoring retry for submission {task_id} in state {task.status}")
            return False

        logger.info(f"Retrying submission {task_id} for review {task.review_id}")
        self._schedule(task)
        return True

    def ignore_submission_errors(self) -> int:
        """Give up on every failed task.

        The results never reach the server. Only call this on explicit user
        request.

        Returns:
            Number of ignored tasks
        """
        failed = self.submission_errors
        for task in failed:
            task.transition_to(SubmissionStatus.IGNORED)
            del self._tasks[task.task_id]

        if failed:
            logger.warning(
                f"Ignored {len(failed)} failed submissions: reviews "
                f"{[t.review_id for t in failed]} were not reported"
            )
        return len(failed)

    async def deliver(self, task: SubmissionTask) -> SubmissionTask:
        """Deliver one task and record the outcome on it.

        Remote failures are recorded as FAILED state, never raised.

        Args:
            task: Task in PENDING or FAILED state

        Returns:
            The same task, now SUCCEEDED or FAILED

        Raises:
            ValueError: If the task is already in flight or resolved
        """
        task.start_attempt()
        logger.debug(f"Delivering submission {task.task_id} (attempt {task.attempts})")

        try:
            updated_review = await retry_operation(
                self._review_service.submit_review,
                task.completion,
                max_attempts=self._max_rate_limit_attempts,
                initial_wait=self._initial_wait,
                jitter=self._jitter,
                retryable_exceptions=(RateLimitedError,),
                on_retry=lambda attempt, exc: logger.info(
                    f"Rate limited, retry {attempt} for review {task.review_id}: {exc}"
                ),
            )
        except InvalidCredentialsError as e:
            self._fail(task, SubmissionFailure.INVALID_CREDENTIALS, e)
        except (TransientDeliveryError, RateLimitedError) as e:
            self._fail(task, SubmissionFailure.TRANSIENT, e)
        except ReviewServiceError as e:
            self._fail(task, SubmissionFailure.GENERIC, e)
        except Exception as e:
            logger.exception(f"Unexpected error delivering review {task.review_id}")
            self._fail(task, SubmissionFailure.GENERIC, e)
        else:
            task.mark_succeeded(updated_review)
            self._tasks.pop(task.task_id, None)
            logger.info(f"Submitted review {task.review_id}")

        return task

    async def join(self) -> None:
        """Wait until every running delivery has finished."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight.values()), return_exceptions=True)

    def _schedule(self, task: SubmissionTask) -> None:
        handle = asyncio.get_running_loop().create_task(self.deliver(task))
        self._inflight[task.task_id] = handle
        handle.add_done_callback(lambda _: self._inflight.pop(task.task_id, None))

    def _fail(self, task: SubmissionTask, failure: SubmissionFailure, error: Exception) -> None:
        message = str(error) or type(error).__name__
        task.mark_failed(failure, message)
        logger.warning(f"Failed to submit review {task.review_id} ({failure}): {message}")
