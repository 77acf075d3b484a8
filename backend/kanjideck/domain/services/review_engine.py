"""Review session engine: answer processing and progress tracking."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from kanjideck.domain.entities.card import Card
from kanjideck.domain.entities.review import Review
from kanjideck.domain.entities.review_progress import ReviewProgress
from kanjideck.domain.errors import MalformedInputError, UnknownReviewError
from kanjideck.domain.services.stats import compute_session_stats
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.domain.value_objects.session_stats import SessionStats
from kanjideck.domain.value_objects.srs_stage import SrsStageChange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of one answered card.

    Attributes:
        card: Card that was answered
        review_completed: True only on the answer that completed the review
        review: Review with this session's incorrect counts applied
        incorrect_meaning_count: Cumulative wrong meaning answers
        incorrect_reading_count: Cumulative wrong reading answers
        srs_stage_change: Expected stage advance, set when the review was
            just completed without mistakes
    """

    card: Card
    review_completed: bool
    review: Review
    incorrect_meaning_count: int
    incorrect_reading_count: int
    srs_stage_change: SrsStageChange | None = None

    def to_completion(self) -> ReviewCompletion:
        """Build the delivery payload for this review."""
        return ReviewCompletion(
            review_id=self.review.id,
            subject_id=self.review.subject_id,
            incorrect_meaning_count=self.incorrect_meaning_count,
            incorrect_reading_count=self.incorrect_reading_count,
        )


class ReviewSessionEngine:
    """Tracks per-review progress for one loaded deck.

    All methods are synchronous and never touch I/O. Delivering completed
    reviews is the caller's next step (see SubmissionQueue).

    The engine trusts the caller to dismiss each card once; answering a
    re-presented card only bumps the incorrect counters and never reports
    completion a second time.
    """

    def __init__(self, reviews: Iterable[Review], cards: Iterable[Card]):
        """Initialize engine from the deck builder output.

        Args:
            reviews: Reviews of the session
            cards: Cards built for those reviews

        Raises:
            MalformedInputError: If a card references an unknown review, or
                a review has no cards
        """
        cards = list(cards)
        reviews_by_id = {review.id: review for review in reviews}

        required: dict[int, list] = {review_id: [] for review_id in reviews_by_id}
        for card in cards:
            if card.review_id not in required:
                raise UnknownReviewError(card.review_id)
            if card.review_type not in required[card.review_id]:
                required[card.review_id].append(card.review_type)

        empty = [review_id for review_id, types in required.items() if not types]
        if empty:
            raise MalformedInputError(f"Reviews without cards: {empty}")

        self._progress: dict[int, ReviewProgress] = {
            review_id: ReviewProgress(review=review, required_types=tuple(required[review_id]))
            for review_id, review in reviews_by_id.items()
        }
        self._total_cards = len(cards)

    @property
    def total_reviews(self) -> int:
        return len(self._progress)

    @property
    def total_cards(self) -> int:
        return self._total_cards

    @property
    def progress(self) -> Mapping[int, ReviewProgress]:
        """Session progress map, keyed by review ID (read-only view)."""
        return MappingProxyType(self._progress)

    @property
    def unfinished_reviews(self) -> dict[int, ReviewProgress]:
        """Reviews with at least one, but not all, question kinds answered."""
        return {
            review_id: entry for review_id, entry in self._progress.items() if entry.is_unfinished
        }

    def get_progress(self, review_id: int) -> ReviewProgress:
        """Get progress of one review.

        Raises:
            UnknownReviewError: If the review is not part of this session
        """
        entry = self._progress.get(review_id)
        if entry is None:
            raise UnknownReviewError(review_id)
        return entry

    def submit_answer(self, card: Card, correct: bool) -> AnswerResult:
        """Record the answer to a card.

        Args:
            card: Card that was answered
            correct: Whether the user got it right

        Returns:
            AnswerResult; ``review_completed`` is True only on the transition
            where the last unanswered question kind gets answered

        Raises:
            MalformedInputError: If the card does not belong to this session
        """
        entry = self.get_progress(card.review_id)
        if card.review_type not in entry.required_types:
            raise MalformedInputError(
                f"Review {card.review_id} has no {card.review_type} card in this session"
            )

        was_completed = entry.completed
        entry.record(card.review_type, correct)

        review_completed = False
        srs_stage_change = None
        if not was_completed and entry.all_answered:
            entry.completed = True
            review_completed = True
            if entry.is_correct:
                srs_stage_change = SrsStageChange.advance(entry.review.srs_stage)
            logger.info(
                f"Review {card.review_id} completed "
                f"(meaning wrong: {entry.incorrect_meaning_count}, "
                f"reading wrong: {entry.incorrect_reading_count})"
            )
        else:
            logger.debug(f"Answered {card.card_id} correct={correct}")

        return AnswerResult(
            card=card,
            review_completed=review_completed,
            review=entry.current_review(),
            incorrect_meaning_count=entry.incorrect_meaning_count,
            incorrect_reading_count=entry.incorrect_reading_count,
            srs_stage_change=srs_stage_change,
        )

    def wrap_up_filter(self, queue: Iterable[Card]) -> list[Card]:
        """Keep only cards of reviews that are started but not completed.

        Args:
            queue: Cards to filter, in order

        Returns:
            Filtered cards, order preserved
        """
        unfinished = self.unfinished_reviews
        return [card for card in queue if card.review_id in unfinished]

    def stats(self) -> SessionStats:
        """Compute session statistics from the progress map."""
        return compute_session_stats(
            self._progress.values(),
            total_reviews=self.total_reviews,
            total_cards=self.total_cards,
        )
