import pytest

from kanjideck.domain.entities.review import Review
from kanjideck.domain.errors import MissingSubjectError
from kanjideck.domain.services.review_session import (
    CardNotFoundError,
    ReviewSession,
    SessionNotStartedError,
)
from kanjideck.domain.services.submission_queue import SubmissionQueue
from kanjideck.domain.value_objects.submission_status import SubmissionStatus
from kanjideck.ports.review_service import (
    InvalidCredentialsError,
    LoadedReviews,
    LoadFailureError,
    NoReviewsError,
    ReviewServiceError,
    TransientDeliveryError,
)


def make_session(service, requeue_incorrect: bool = False) -> ReviewSession:
    queue = SubmissionQueue(service, initial_wait=0, jitter=0)
    return ReviewSession(service, queue, requeue_incorrect=requeue_incorrect)


@pytest.mark.asyncio
async def test_start_builds_deck(review_service):
    session = make_session(review_service)

    result = await session.start()

    assert result.total_reviews == 4
    assert result.total_cards == 6
    assert session.is_started
    assert [c.card_id for c in session.visible_queue] == [
        "1_meaning",
        "1_reading",
        "2_meaning",
        "2_reading",
        "3_meaning",
        "4_meaning",
    ]
    assert session.current_card.card_id == "1_meaning"
    assert not session.is_queue_clear
    assert set(session.subjects) == {10, 20, 30, 40}


@pytest.mark.asyncio
async def test_start_without_reviews(review_service):
    review_service.load_reviews.return_value = LoadedReviews(reviews=[], subjects=[])
    session = make_session(review_service)

    with pytest.raises(NoReviewsError):
        await session.start()
    assert not session.is_started


@pytest.mark.asyncio
async def test_start_wraps_service_errors(review_service):
    review_service.load_reviews.side_effect = TransientDeliveryError("offline")
    session = make_session(review_service)

    with pytest.raises(LoadFailureError):
        await session.start()


@pytest.mark.asyncio
async def test_start_passes_invalid_credentials_through(review_service):
    review_service.load_reviews.side_effect = InvalidCredentialsError("Invalid API Key")
    session = make_session(review_service)

    with pytest.raises(InvalidCredentialsError):
        await session.start()


@pytest.mark.asyncio
async def test_failed_reload_keeps_previous_session(review_service, reviews):
    session = make_session(review_service)
    await session.start()
    session.answer("1_meaning", True)

    review_service.load_reviews.return_value = LoadedReviews(reviews=reviews, subjects=[])
    with pytest.raises(MissingSubjectError):
        await session.start()

    assert 1 in session.engine.unfinished_reviews
    assert len(session.visible_queue) == 5


def test_session_not_started(review_service):
    session = make_session(review_service)

    assert session.visible_queue == []
    assert session.current_card is None
    assert not session.is_queue_clear
    with pytest.raises(SessionNotStartedError):
        session.answer("1_meaning", True)
    with pytest.raises(SessionNotStartedError):
        session.stats()


@pytest.mark.asyncio
async def test_answer_completing_review_enqueues_submission(review_service):
    session = make_session(review_service)
    await session.start()

    first = session.answer("1_meaning", False)
    assert first.submission is None
    assert not first.result.review_completed
    assert session.submission_queue == []

    second = session.answer("1_reading", True)
    assert second.result.review_completed
    assert second.result.srs_stage_change is None
    task = second.submission
    assert task is not None
    assert task.completion.review_id == 1
    assert task.completion.incorrect_meaning_count == 1
    assert task.completion.incorrect_reading_count == 0
    assert session.submission_queue == [task]

    await session.submissions.join()

    assert task.status == SubmissionStatus.SUCCEEDED
    assert session.submission_queue == []
    review_service.submit_review.assert_awaited_once_with(task.completion)


@pytest.mark.asyncio
async def test_single_card_review_completes_at_once(review_service):
    session = make_session(review_service)
    await session.start()

    answer = session.answer("3_meaning", True)

    assert answer.result.review_completed
    assert answer.result.srs_stage_change.current == 8
    assert answer.result.srs_stage_change.next == 9
    await session.submissions.join()


@pytest.mark.asyncio
async def test_answer_unknown_or_dismissed_card(review_service):
    session = make_session(review_service)
    await session.start()

    with pytest.raises(CardNotFoundError):
        session.answer("99_meaning", True)

    session.answer("1_meaning", True)
    with pytest.raises(CardNotFoundError):
        session.answer("1_meaning", True)


@pytest.mark.asyncio
async def test_wrap_up_mode_shows_started_reviews_only(review_service):
    session = make_session(review_service)
    await session.start()
    session.answer("2_meaning", True)

    session.set_wrap_up_mode(True)

    assert [c.card_id for c in session.visible_queue] == ["2_reading"]

    session.answer("2_reading", True)
    assert session.is_queue_clear
    # The live queue still holds the untouched reviews
    assert len(session.queue) == 4

    session.set_wrap_up_mode(False)
    assert session.current_card.card_id == "1_meaning"
    await session.submissions.join()


@pytest.mark.asyncio
async def test_requeue_incorrect_asks_again(review_service):
    session = make_session(review_service, requeue_incorrect=True)
    await session.start()

    session.answer("1_meaning", False)

    assert session.visible_queue[-1].card_id == "1_meaning"

    completing = session.answer("1_reading", True)
    assert completing.result.review_completed
    assert completing.submission.completion.incorrect_meaning_count == 1

    # The re-asked card is dropped once its review is complete
    assert [c.card_id for c in session.visible_queue] == [
        "2_meaning",
        "2_reading",
        "3_meaning",
        "4_meaning",
    ]
    with pytest.raises(CardNotFoundError):
        session.answer("1_meaning", False)
    assert session.engine.get_progress(1).incorrect_meaning_count == 1
    await session.submissions.join()


@pytest.mark.asyncio
async def test_requeue_incorrect_twice_before_completion(review_service):
    session = make_session(review_service, requeue_incorrect=True)
    await session.start()

    session.answer("1_meaning", False)
    session.answer("1_meaning", False)

    assert [c.card_id for c in session.visible_queue].count("1_meaning") == 1
    answer = session.answer("1_reading", True)
    assert answer.submission.completion.incorrect_meaning_count == 2
    assert "1_meaning" not in [c.card_id for c in session.visible_queue]
    await session.submissions.join()


@pytest.mark.asyncio
async def test_incorrect_card_dropped_by_default(review_service):
    session = make_session(review_service)
    await session.start()

    session.answer("1_meaning", False)

    assert "1_meaning" not in [c.card_id for c in session.visible_queue]


@pytest.mark.asyncio
async def test_reload_drops_unfinished_reviews(review_service):
    session = make_session(review_service)
    await session.start()
    session.answer("1_meaning", True)
    session.set_wrap_up_mode(True)
    assert 1 in session.engine.unfinished_reviews

    await session.start()

    assert session.engine.unfinished_reviews == {}
    assert not session.wrap_up_mode
    assert len(session.visible_queue) == 6


@pytest.mark.asyncio
async def test_submissions_survive_reload(review_service):
    review_service.submit_review.side_effect = ReviewServiceError("HTTP 500")
    session = make_session(review_service)
    await session.start()
    task = session.answer("3_meaning", True).submission
    await session.submissions.join()
    assert session.submission_errors == [task]

    await session.start()

    assert session.submission_errors == [task]
    review_service.submit_review.side_effect = None
    review_service.submit_review.return_value = Review(id=3, subject_id=30, srs_stage=9)
    assert session.retry_submission(task.task_id) is True
    await session.submissions.join()
    assert session.submission_errors == []


@pytest.mark.asyncio
async def test_ignore_submission_errors(review_service):
    review_service.submit_review.side_effect = TransientDeliveryError("offline")
    session = make_session(review_service)
    await session.start()
    session.answer("3_meaning", True)
    session.answer("4_meaning", False)
    await session.submissions.join()

    assert session.ignore_submission_errors() == 2
    assert session.submission_errors == []


@pytest.mark.asyncio
async def test_stats_follow_answers(review_service):
    session = make_session(review_service)
    await session.start()
    session.answer("1_meaning", True)
    session.answer("3_meaning", False)

    stats = session.stats()

    assert stats.cards.completed == 2
    assert stats.cards.correct == 1
    assert stats.reviews.completed == 1
    assert stats.reviews.incorrect == 1
    assert stats.reviews.unfinished == 1
    await session.submissions.join()


@pytest.mark.asyncio
async def test_wrap_up_mode_rejects_hidden_cards(review_service):
    session = make_session(review_service)
    await session.start()
    session.answer("2_meaning", True)
    session.set_wrap_up_mode(True)

    with pytest.raises(CardNotFoundError, match="wrap-up"):
        session.answer("1_meaning", True)
    assert session.engine.get_progress(1).answers == {}

    session.set_wrap_up_mode(False)
    assert not session.answer("1_meaning", True).result.review_completed
