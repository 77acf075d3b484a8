"""Card entity: one atomic question derived from a review."""

from dataclasses import dataclass
from typing import TypedDict

from kanjideck.domain.value_objects.review_type import ReviewType


class CardDict(TypedDict):
    """Card data structure for serialization."""

    card_id: str
    review_id: int
    review_type: str


@dataclass(frozen=True)
class Card:
    """Question card.

    ``card_id`` is derived from ``(review_id, review_type)`` so the pair and
    the ID identify each other.

    Attributes:
        card_id: "<review_id>_<review_type>"
        review_id: Review this card belongs to
        review_type: Question kind asked by this card
    """

    card_id: str
    review_id: int
    review_type: ReviewType

    @classmethod
    def for_review(cls, review_id: int, review_type: ReviewType) -> "Card":
        """Create the card asking ``review_type`` for a review."""
        return cls(
            card_id=f"{review_id}_{review_type}",
            review_id=review_id,
            review_type=review_type,
        )

    def to_dict(self) -> CardDict:
        """Convert card to dictionary for serialization."""
        return {
            "card_id": self.card_id,
            "review_id": self.review_id,
            "review_type": str(self.review_type),
        }
