"""Review completion value object (the payload delivered to the server)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewCompletion:
    """Result of a completed review, immutable once created.

    Attributes:
        review_id: Assignment ID on the remote service
        subject_id: Subject the review quizzed on
        incorrect_meaning_count: Wrong meaning answers during the session
        incorrect_reading_count: Wrong reading answers during the session
    """

    review_id: int
    subject_id: int
    incorrect_meaning_count: int
    incorrect_reading_count: int

    def __post_init__(self) -> None:
        if self.incorrect_meaning_count < 0 or self.incorrect_reading_count < 0:
            raise ValueError("incorrect answer counts must be >= 0")

    @property
    def is_correct(self) -> bool:
        """A review passes when neither side was answered wrong."""
        return self.incorrect_meaning_count == 0 and self.incorrect_reading_count == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "review_id": self.review_id,
            "subject_id": self.subject_id,
            "incorrect_meaning_count": self.incorrect_meaning_count,
            "incorrect_reading_count": self.incorrect_reading_count,
        }
