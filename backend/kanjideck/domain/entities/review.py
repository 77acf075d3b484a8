"""Review entity representing a due WaniKani assignment."""

from dataclasses import dataclass

from kanjideck.domain.errors import MalformedInputError


@dataclass(frozen=True)
class Review:
    """A due learning item tied to one subject.

    Attributes:
        id: Assignment ID on the remote service
        subject_id: Subject being reviewed
        srs_stage: Current spaced-repetition stage (0 = lesson not done)
        incorrect_meaning_count: Wrong meaning answers so far this session
        incorrect_reading_count: Wrong reading answers so far this session
    """

    id: int
    subject_id: int
    srs_stage: int
    incorrect_meaning_count: int = 0
    incorrect_reading_count: int = 0

    def __post_init__(self) -> None:
        """Validate field ranges."""
        if self.srs_stage < 0:
            raise MalformedInputError(f"srs_stage must be >= 0, got {self.srs_stage}")
        if self.incorrect_meaning_count < 0 or self.incorrect_reading_count < 0:
            raise MalformedInputError("incorrect answer counts must be >= 0")

    @property
    def is_correct(self) -> bool:
        """Whether no answer has been wrong so far."""
        return self.incorrect_meaning_count == 0 and self.incorrect_reading_count == 0

    @classmethod
    def from_api(cls, resource: dict) -> "Review":
        """Create from a WaniKani assignment resource.

        Raises:
            MalformedInputError: If a required field is missing
        """
        try:
            data = resource["data"]
            return cls(
                id=int(resource["id"]),
                subject_id=int(data["subject_id"]),
                srs_stage=int(data["srs_stage"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedInputError(f"Invalid assignment resource: {e!r}") from e
