"""Subject type value object for WaniKani learning items."""

from enum import StrEnum

from kanjideck.domain.value_objects.review_type import ReviewType


class SubjectType(StrEnum):
    """Closed set of learning-item kinds.

    Values match the ``object`` field of WaniKani subject resources.
    """

    RADICAL = "radical"
    KANJI = "kanji"
    VOCABULARY = "vocabulary"
    KANA_VOCABULARY = "kana_vocabulary"

    @property
    def review_types(self) -> tuple[ReviewType, ...]:
        """Question kinds supported by this subject type, in asking order."""
        if self in (SubjectType.RADICAL, SubjectType.KANA_VOCABULARY):
            return (ReviewType.MEANING,)
        return (ReviewType.MEANING, ReviewType.READING)

    def has_reading(self) -> bool:
        """Check if subjects of this type are quizzed on their reading."""
        return ReviewType.READING in self.review_types
