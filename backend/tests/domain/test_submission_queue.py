import asyncio
from unittest.mock import AsyncMock

import pytest

from kanjideck.domain.entities.review import Review
from kanjideck.domain.services.submission_queue import (
    SubmissionNotFoundError,
    SubmissionQueue,
)
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.domain.value_objects.submission_status import (
    SubmissionFailure,
    SubmissionStatus,
)
from kanjideck.ports.review_service import (
    InvalidCredentialsError,
    RateLimitedError,
    ReviewServiceError,
    TransientDeliveryError,
)


def completion(review_id: int = 1, meaning: int = 0, reading: int = 0) -> ReviewCompletion:
    return ReviewCompletion(
        review_id=review_id,
        subject_id=review_id * 10,
        incorrect_meaning_count=meaning,
        incorrect_reading_count=reading,
    )


def make_queue(service) -> SubmissionQueue:
    return SubmissionQueue(service, max_rate_limit_attempts=3, initial_wait=0, jitter=0)


@pytest.fixture
def service():
    service = AsyncMock()
    service.submit_review.return_value = Review(id=1, subject_id=10, srs_stage=5)
    return service


@pytest.mark.asyncio
async def test_enqueue_delivers_in_background(service):
    queue = make_queue(service)

    task = queue.enqueue(completion())

    # Nothing ran yet: enqueue does not wait
    assert task.status == SubmissionStatus.PENDING
    assert queue.submission_queue == [task]
    assert queue.submission_errors == []
    assert not queue.is_idle

    await queue.join()

    assert task.status == SubmissionStatus.SUCCEEDED
    assert task.updated_review.srs_stage == 5
    assert queue.submission_queue == []
    assert queue.submission_errors == []
    assert len(queue) == 0
    assert queue.is_idle
    service.submit_review.assert_awaited_once_with(task.completion)


@pytest.mark.asyncio
async def test_transient_failure_then_manual_retry(service):
    """Scenario D."""
    updated = Review(id=1, subject_id=10, srs_stage=2)
    service.submit_review.side_effect = [TransientDeliveryError("Network error: timeout"), updated]
    queue = make_queue(service)

    task = queue.enqueue(completion(meaning=1))
    await queue.join()

    assert task.status == SubmissionStatus.FAILED
    assert task.failure == SubmissionFailure.TRANSIENT
    assert task.error_message == "Network error: timeout"
    assert queue.submission_errors == [task]
    assert queue.submission_queue == []
    # Never retried on its own
    assert service.submit_review.await_count == 1

    assert queue.retry_submission(task.task_id) is True
    await queue.join()

    assert task.status == SubmissionStatus.SUCCEEDED
    assert task.attempts == 2
    assert queue.submission_errors == []
    assert queue.submission_queue == []
    first_payload = service.submit_review.await_args_list[0].args[0]
    second_payload = service.submit_review.await_args_list[1].args[0]
    assert first_payload is second_payload
    assert second_payload == completion(meaning=1)


@pytest.mark.asyncio
async def test_ignore_submission_errors(service):
    """Scenario E."""
    service.submit_review.side_effect = TransientDeliveryError("offline")
    queue = make_queue(service)

    first = queue.enqueue(completion(1))
    second = queue.enqueue(completion(2))
    await queue.join()
    assert queue.submission_errors == [first, second]

    assert queue.ignore_submission_errors() == 2

    assert queue.submission_errors == []
    assert len(queue) == 0
    assert first.status == SubmissionStatus.IGNORED
    assert second.status == SubmissionStatus.IGNORED

    with pytest.raises(SubmissionNotFoundError):
        queue.retry_submission(first.task_id)
    await queue.join()
    assert service.submit_review.await_count == 2


@pytest.mark.asyncio
async def test_ignore_leaves_queued_tasks_alone(service):
    release = asyncio.Event()

    async def submit(payload):
        if payload.review_id == 1:
            raise TransientDeliveryError("offline")
        await release.wait()
        return None

    service.submit_review.side_effect = submit
    queue = make_queue(service)

    failed = queue.enqueue(completion(1))
    running = queue.enqueue(completion(2))
    await asyncio.sleep(0.01)

    assert queue.ignore_submission_errors() == 1
    assert queue.submission_queue == [running]
    assert failed.status == SubmissionStatus.IGNORED

    release.set()
    await queue.join()
    assert running.status == SubmissionStatus.SUCCEEDED


@pytest.mark.asyncio
async def test_invalid_credentials_not_retried(service):
    service.submit_review.side_effect = InvalidCredentialsError("Invalid API Key")
    queue = make_queue(service)

    task = queue.enqueue(completion())
    await queue.join()

    assert task.status == SubmissionStatus.FAILED
    assert task.failure == SubmissionFailure.INVALID_CREDENTIALS
    assert service.submit_review.await_count == 1


@pytest.mark.asyncio
async def test_rate_limit_backoff_then_success(service):
    service.submit_review.side_effect = [
        RateLimitedError("slow down"),
        Review(id=1, subject_id=10, srs_stage=6),
    ]
    queue = make_queue(service)

    task = queue.enqueue(completion())
    await queue.join()

    assert task.status == SubmissionStatus.SUCCEEDED
    assert task.attempts == 1
    assert service.submit_review.await_count == 2


@pytest.mark.asyncio
async def test_rate_limit_exhausted_surfaces_as_transient(service):
    service.submit_review.side_effect = RateLimitedError("slow down")
    queue = make_queue(service)

    task = queue.enqueue(completion())
    await queue.join()

    assert task.status == SubmissionStatus.FAILED
    assert task.failure == SubmissionFailure.TRANSIENT
    assert service.submit_review.await_count == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [ReviewServiceError("HTTP 500"), RuntimeError("boom")])
async def test_other_errors_are_generic_failures(service, error):
    service.submit_review.side_effect = error
    queue = make_queue(service)

    task = queue.enqueue(completion())
    await queue.join()

    assert task.status == SubmissionStatus.FAILED
    assert task.failure == SubmissionFailure.GENERIC
    assert queue.submission_errors == [task]


@pytest.mark.asyncio
async def test_redundant_retry_is_ignored(service):
    release = asyncio.Event()
    calls = 0

    async def submit(payload):
        nonlocal calls
        calls += 1
        if calls == 1:
            raise TransientDeliveryError("offline")
        await release.wait()
        return None

    service.submit_review.side_effect = submit
    queue = make_queue(service)

    task = queue.enqueue(completion())
    await queue.join()

    assert queue.retry_submission(task.task_id) is True
    await asyncio.sleep(0.01)
    assert task.status == SubmissionStatus.IN_FLIGHT
    assert queue.submission_queue == [task]

    assert queue.retry_submission(task.task_id) is False

    release.set()
    await queue.join()
    assert calls == 2
    assert task.status == SubmissionStatus.SUCCEEDED


@pytest.mark.asyncio
async def test_retry_of_pending_task_is_ignored(service):
    queue = make_queue(service)
    task = queue.enqueue(completion())

    assert queue.retry_submission(task.task_id) is False

    await queue.join()
    assert service.submit_review.await_count == 1


@pytest.mark.asyncio
async def test_deliver_rejects_task_in_flight(service):
    release = asyncio.Event()

    async def submit(payload):
        await release.wait()
        return None

    service.submit_review.side_effect = submit
    queue = make_queue(service)
    task = queue.enqueue(completion())
    await asyncio.sleep(0.01)

    with pytest.raises(ValueError):
        await queue.deliver(task)

    release.set()
    await queue.join()


@pytest.mark.asyncio
async def test_concurrent_deliveries(service):
    release = asyncio.Event()

    async def submit(payload):
        await release.wait()
        return Review(id=payload.review_id, subject_id=payload.subject_id, srs_stage=1)

    service.submit_review.side_effect = submit
    queue = make_queue(service)

    tasks = [queue.enqueue(completion(i)) for i in range(1, 4)]
    await asyncio.sleep(0.01)
    assert all(t.status == SubmissionStatus.IN_FLIGHT for t in tasks)

    release.set()
    await queue.join()
    assert all(t.status == SubmissionStatus.SUCCEEDED for t in tasks)
    assert {t.updated_review.id for t in tasks} == {1, 2, 3}


def test_retry_unknown_task(service):
    queue = make_queue(service)
    with pytest.raises(SubmissionNotFoundError):
        queue.retry_submission("missing")


def test_enqueue_requires_running_loop(service):
    queue = make_queue(service)
    with pytest.raises(RuntimeError):
        queue.enqueue(completion())
    assert queue.submission_queue == []


@pytest.mark.asyncio
async def test_resolved_tasks_are_not_retained(service):
    queue = make_queue(service)

    for _ in range(3):
        tasks = [queue.enqueue(completion(i)) for i in range(1, 5)]
        await queue.join()
        assert all(t.status == SubmissionStatus.SUCCEEDED for t in tasks)

    assert len(queue) == 0
    with pytest.raises(SubmissionNotFoundError):
        queue.get_task(tasks[0].task_id)

    service.submit_review.side_effect = TransientDeliveryError("offline")
    failed = queue.enqueue(completion(9))
    await queue.join()
    assert len(queue) == 1

    queue.ignore_submission_errors()
    assert len(queue) == 0
    assert failed.status == SubmissionStatus.IGNORED
