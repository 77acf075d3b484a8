"""Review queue entity: the live deck of a session."""

from collections.abc import Iterable, Iterator

from kanjideck.domain.entities.card import Card


class ReviewQueue:
    """Ordered sequence of live cards.

    A card leaves the queue exactly once, when the user dismisses it. It can
    only come back through an explicit ``requeue`` after that, so no two live
    entries ever share a card ID.
    """

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: list[Card] = []
        self._live_ids: set[str] = set()
        for card in cards:
            self._append(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __contains__(self, card: object) -> bool:
        return isinstance(card, Card) and card.card_id in self._live_ids

    @property
    def cards(self) -> list[Card]:
        """Snapshot of the live cards, in asking order."""
        return list(self._cards)

    def peek(self) -> Card | None:
        """Get the next card to ask, or None if the queue is empty."""
        return self._cards[0] if self._cards else None

    def get(self, card_id: str) -> Card | None:
        """Find a live card by ID."""
        if card_id not in self._live_ids:
            return None
        return next(c for c in self._cards if c.card_id == card_id)

    def dismiss(self, card: Card) -> None:
        """Remove an answered card from the queue.

        Raises:
            ValueError: If the card is not live
        """
        if card.card_id not in self._live_ids:
            raise ValueError(f"Card {card.card_id} is not in the queue")
        self._cards.remove(card)
        self._live_ids.discard(card.card_id)

    def requeue(self, card: Card) -> None:
        """Put a dismissed card back at the end of the queue.

        Raises:
            ValueError: If the card is still live
        """
        self._append(card)

    def discard_review(self, review_id: int) -> list[Card]:
        """Remove every live card of a review.

        Returns:
            The removed cards, in queue order
        """
        removed = [c for c in self._cards if c.review_id == review_id]
        for card in removed:
            self._cards.remove(card)
            self._live_ids.discard(card.card_id)
        return removed

    def _append(self, card: Card) -> None:
        if card.card_id in self._live_ids:
            raise ValueError(f"Card {card.card_id} is already in the queue")
        self._cards.append(card)
        self._live_ids.add(card.card_id)
