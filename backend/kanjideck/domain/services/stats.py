"""Stats aggregator: derives session statistics from progress state."""

from collections.abc import Iterable

from kanjideck.domain.entities.review_progress import ReviewProgress
from kanjideck.domain.value_objects.session_stats import CardStats, ReviewStats, SessionStats


def compute_session_stats(
    progress: Iterable[ReviewProgress],
    total_reviews: int,
    total_cards: int,
) -> SessionStats:
    """Compute completion and correctness at review and card level.

    Pure function of its inputs.

    Args:
        progress: Progress entries of the session, one per review
        total_reviews: Reviews in the session deck
        total_cards: Cards in the session deck

    Returns:
        SessionStats snapshot
    """
    reviews_completed = reviews_correct = reviews_unfinished = 0
    cards_completed = cards_correct = 0

    for entry in progress:
        cards_completed += len(entry.answers)
        cards_correct += sum(1 for correct in entry.answers.values() if correct)

        if entry.completed:
            reviews_completed += 1
            if entry.is_correct:
                reviews_correct += 1
        elif entry.is_unfinished:
            reviews_unfinished += 1

    return SessionStats(
        reviews=ReviewStats(
            total=total_reviews,
            completed=reviews_completed,
            correct=reviews_correct,
            incorrect=reviews_completed - reviews_correct,
            unfinished=reviews_unfinished,
        ),
        cards=CardStats(
            total=total_cards,
            completed=cards_completed,
            correct=cards_correct,
            incorrect=cards_completed - cards_correct,
        ),
    )
