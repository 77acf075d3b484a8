"""Per-review progress entry of a review session."""

from dataclasses import dataclass, field, replace

from kanjideck.domain.entities.review import Review
from kanjideck.domain.value_objects.review_type import ReviewType


@dataclass
class ReviewProgress:
    """Tracks which question kinds of one review have been answered.

    Attributes:
        review: Review as loaded at session start
        required_types: Question kinds the deck produced cards for
        answers: Latest answer per question kind (True = correct)
        incorrect_meaning_count: Cumulative wrong meaning answers
        incorrect_reading_count: Cumulative wrong reading answers
        completed: Set once, when the last required kind gets answered
    """

    review: Review
    required_types: tuple[ReviewType, ...]
    answers: dict[ReviewType, bool] = field(default_factory=dict)
    incorrect_meaning_count: int = 0
    incorrect_reading_count: int = 0
    completed: bool = False

    @property
    def is_started(self) -> bool:
        return bool(self.answers)

    @property
    def is_unfinished(self) -> bool:
        """Some, but not all, required question kinds have been answered."""
        return self.is_started and not self.completed

    @property
    def all_answered(self) -> bool:
        return all(t in self.answers for t in self.required_types)

    @property
    def is_correct(self) -> bool:
        return self.incorrect_meaning_count == 0 and self.incorrect_reading_count == 0

    def record(self, review_type: ReviewType, correct: bool) -> None:
        """Record an answer for one question kind."""
        if not correct:
            if review_type is ReviewType.MEANING:
                self.incorrect_meaning_count += 1
            else:
                self.incorrect_reading_count += 1
        self.answers[review_type] = correct

    def current_review(self) -> Review:
        """Review with this session's incorrect counts applied."""
        return replace(
            self.review,
            incorrect_meaning_count=self.incorrect_meaning_count,
            incorrect_reading_count=self.incorrect_reading_count,
        )
