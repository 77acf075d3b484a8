"""Session statistics value objects."""

from dataclasses import asdict, dataclass


def percent(part: int, whole: int) -> float:
    """Share of ``part`` in ``whole`` as 0-100, or 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


@dataclass(frozen=True)
class CardStats:
    """Card-level counts. Percentages are over answered cards only."""

    total: int
    completed: int
    correct: int
    incorrect: int

    @property
    def correct_percent(self) -> float:
        return percent(self.correct, self.completed)

    @property
    def incorrect_percent(self) -> float:
        return percent(self.incorrect, self.completed)

    def to_dict(self) -> dict:
        return {
            **asdict(self),
            "correct_percent": self.correct_percent,
            "incorrect_percent": self.incorrect_percent,
        }


@dataclass(frozen=True)
class ReviewStats:
    """Review-level counts.

    ``unfinished`` counts reviews with some, but not all, of their cards
    answered. Percentages are over completed reviews only.
    """

    total: int
    completed: int
    correct: int
    incorrect: int
    unfinished: int

    @property
    def correct_percent(self) -> float:
        return percent(self.correct, self.completed)

    @property
    def incorrect_percent(self) -> float:
        return percent(self.incorrect, self.completed)

    def to_dict(self) -> dict:
        return {
            **asdict(self),
            "correct_percent": self.correct_percent,
            "incorrect_percent": self.incorrect_percent,
        }


@dataclass(frozen=True)
class SessionStats:
    """Progress of a review session at both granularities."""

    reviews: ReviewStats
    cards: CardStats

    def to_dict(self) -> dict:
        return {"reviews": self.reviews.to_dict(), "cards": self.cards.to_dict()}
