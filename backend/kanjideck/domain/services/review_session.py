"""Review session: caller-owned context around engine, deck and submissions."""

import logging
from dataclasses import dataclass

from kanjideck.domain.entities.card import Card
from kanjideck.domain.entities.review_queue import ReviewQueue
from kanjideck.domain.entities.subject import Subject
from kanjideck.domain.entities.submission_task import SubmissionTask
from kanjideck.domain.services.deck_builder import build_deck, index_subjects
from kanjideck.domain.services.review_engine import AnswerResult, ReviewSessionEngine
from kanjideck.domain.services.submission_queue import SubmissionQueue
from kanjideck.domain.value_objects.session_stats import SessionStats
from kanjideck.ports.review_service import (
    InvalidCredentialsError,
    LoadFailureError,
    NoReviewsError,
    ReviewServiceError,
    ReviewsLoader,
)

logger = logging.getLogger(__name__)


class SessionNotStartedError(Exception):
    """Raised when using a session before a successful load."""

    pass


class CardNotFoundError(Exception):
    """Raised when answering a card that is not in the live queue."""

    pass


@dataclass
class StartSessionResult:
    """Result of loading a session."""

    total_reviews: int
    total_cards: int


@dataclass
class SessionAnswer:
    """Result of answering a card in a session.

    Attributes:
        result: Engine outcome for the answer
        submission: Task created when the answer completed its review
    """

    result: AnswerResult
    submission: SubmissionTask | None = None


class ReviewSession:
    """Drives one review session.

    Responsibilities:
    - Loading reviews and building the deck (fresh engine on every load)
    - Dismissing answered cards from the live queue
    - Handing completed reviews to the SubmissionQueue
    - Wrap-up mode (only ask reviews with unfinished pairs)

    The SubmissionQueue outlives reloads: deliveries of a previous load keep
    running and stay retryable.
    """

    def __init__(
        self,
        loader: ReviewsLoader,
        submission_queue: SubmissionQueue,
        requeue_incorrect: bool = False,
    ):
        """Initialize review session.

        Args:
            loader: Port for the initial bulk fetch
            submission_queue: Queue delivering completed reviews
            requeue_incorrect: Ask a wrongly answered card again at the end
                of the queue while its review is still incomplete
        """
        self._loader = loader
        self._submissions = submission_queue
        self._requeue_incorrect = requeue_incorrect
        self._engine: ReviewSessionEngine | None = None
        self._queue = ReviewQueue()
        self._subjects: dict[int, Subject] = {}
        self.wrap_up_mode = False

    @property
    def is_started(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> ReviewSessionEngine:
        """Engine of the current load.

        Raises:
            SessionNotStartedError: If no load succeeded yet
        """
        if self._engine is None:
            raise SessionNotStartedError("Review session has not been loaded")
        return self._engine

    @property
    def submissions(self) -> SubmissionQueue:
        return self._submissions

    @property
    def queue(self) -> ReviewQueue:
        return self._queue

    @property
    def subjects(self) -> dict[int, Subject]:
        return dict(self._subjects)

    @property
    def visible_queue(self) -> list[Card]:
        """Cards to ask, with the wrap-up filter applied when enabled."""
        if self._engine is None:
            return []
        if self.wrap_up_mode:
            return self._engine.wrap_up_filter(self._queue)
        return self._queue.cards

    @property
    def current_card(self) -> Card | None:
        visible = self.visible_queue
        return visible[0] if visible else None

    @property
    def is_queue_clear(self) -> bool:
        return self.is_started and not self.visible_queue

    @property
    def submission_queue(self) -> list[SubmissionTask]:
        return self._submissions.submission_queue

    @property
    def submission_errors(self) -> list[SubmissionTask]:
        return self._submissions.submission_errors

    async def start(self) -> StartSessionResult:
        """Load due reviews and build a fresh session.

        Progress of a previous load, unfinished reviews included, is dropped.

        Returns:
            StartSessionResult with deck sizes

        Raises:
            InvalidCredentialsError: If the API key is rejected
            NoReviewsError: If nothing is due
            LoadFailureError: If loading failed for any other reason
            MalformedInputError: If the loaded data is inconsistent
        """
        try:
            loaded = await self._loader.load_reviews()
        except (InvalidCredentialsError, LoadFailureError):
            raise
        except ReviewServiceError as e:
            raise LoadFailureError(f"Cannot load reviews: {e}") from e

        if not loaded.reviews:
            raise NoReviewsError("No reviews available")

        subjects = index_subjects(loaded.subjects)
        cards = build_deck(loaded.reviews, subjects)
        engine = ReviewSessionEngine(loaded.reviews, cards)

        # Swap state only once everything is built
        self._subjects = subjects
        self._engine = engine
        self._queue = ReviewQueue(cards)
        self.wrap_up_mode = False

        logger.info(f"Review session loaded: {engine.total_reviews} reviews, {len(cards)} cards")
        return StartSessionResult(total_reviews=engine.total_reviews, total_cards=len(cards))

    def answer(self, card_id: str, correct: bool) -> SessionAnswer:
        """Answer a visible card.

        Args:
            card_id: ID of the answered card
            correct: Whether the user got it right

        Returns:
            SessionAnswer, with the submission task if the review completed

        Raises:
            SessionNotStartedError: If no load succeeded yet
            CardNotFoundError: If the card is not in the live queue, or is
                hidden by wrap-up mode
        """
        engine = self.engine
        card = self._queue.get(card_id)
        if card is None:
            raise CardNotFoundError(f"Card {card_id} is not in the queue")
        if self.wrap_up_mode and card not in self.visible_queue:
            raise CardNotFoundError(f"Card {card_id} is hidden in wrap-up mode")

        self._queue.dismiss(card)
        result = engine.submit_answer(card, correct)

        if (
            not correct
            and self._requeue_incorrect
            and not engine.get_progress(card.review_id).completed
        ):
            self._queue.requeue(card)

        submission = None
        if result.review_completed:
            # Re-asked cards of a completed review are stale
            self._queue.discard_review(card.review_id)
            submission = self._submissions.enqueue(result.to_completion())

        return SessionAnswer(result=result, submission=submission)

    def set_wrap_up_mode(self, enabled: bool) -> None:
        self.wrap_up_mode = enabled
        logger.debug(f"Wrap-up mode {'enabled' if enabled else 'disabled'}")

    def stats(self) -> SessionStats:
        return self.engine.stats()

    def retry_submission(self, task_id: str) -> bool:
        return self._submissions.retry_submission(task_id)

    def ignore_submission_errors(self) -> int:
        return self._submissions.ignore_submission_errors()
