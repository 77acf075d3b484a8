"""Card deck builder: turns loaded reviews into question cards."""

import logging
from collections.abc import Iterable, Mapping

from kanjideck.domain.entities.card import Card
from kanjideck.domain.entities.review import Review
from kanjideck.domain.entities.subject import Subject
from kanjideck.domain.errors import MissingSubjectError

logger = logging.getLogger(__name__)


def index_subjects(subjects: Iterable[Subject]) -> dict[int, Subject]:
    """Index subjects by ID."""
    return {subject.id: subject for subject in subjects}


def build_deck(
    reviews: Iterable[Review],
    subjects: Iterable[Subject] | Mapping[int, Subject],
) -> list[Card]:
    """Build the card deck for a session.

    Each review yields one card per question kind its subject supports,
    meaning before reading. Cards follow review order, so the same input
    always gives the same deck.

    Args:
        reviews: Due reviews, in loader order
        subjects: Subjects referenced by the reviews (list or ID index)

    Returns:
        Ordered list of cards

    Raises:
        MissingSubjectError: If a review's subject was not loaded
    """
    subjects_by_id = subjects if isinstance(subjects, Mapping) else index_subjects(subjects)

    cards: list[Card] = []
    review_count = 0
    for review in reviews:
        subject = subjects_by_id.get(review.subject_id)
        if subject is None:
            raise MissingSubjectError(review.id, review.subject_id)
        cards.extend(Card.for_review(review.id, t) for t in subject.review_types)
        review_count += 1

    logger.debug(f"Built deck of {len(cards)} cards from {review_count} reviews")
    return cards
