"""Subject entity representing a WaniKani learning item."""

from dataclasses import dataclass, field
from typing import Any

from kanjideck.domain.errors import MalformedInputError
from kanjideck.domain.value_objects.review_type import ReviewType
from kanjideck.domain.value_objects.subject_type import SubjectType


@dataclass(frozen=True)
class Subject:
    """Read-only learning item a review quizzes on.

    Attributes:
        id: Subject ID on the remote service
        type: Kind of learning item (radical, kanji, ...)
        data: Raw subject payload, consumed by the question renderer
    """

    id: int
    type: SubjectType
    data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def review_types(self) -> tuple[ReviewType, ...]:
        """Question kinds this subject is quizzed on."""
        return self.type.review_types

    @property
    def meanings(self) -> list[str]:
        """Accepted meanings, primary first."""
        meanings = sorted(
            self.data.get("meanings", []),
            key=lambda m: not m.get("primary", False),
        )
        return [m["meaning"] for m in meanings if "meaning" in m]

    @property
    def characters(self) -> str:
        """Characters to display.

        Some radicals are image-only and have no characters; the primary
        meaning is shown instead.
        """
        characters = self.data.get("characters")
        if characters:
            return characters
        meanings = self.meanings
        return meanings[0] if meanings else ""

    @classmethod
    def from_api(cls, resource: dict) -> "Subject":
        """Create from a WaniKani subject resource.

        Raises:
            MalformedInputError: If a required field is missing or the
                subject kind is unknown
        """
        try:
            subject_id = int(resource["id"])
            kind = resource["object"]
            data = resource["data"]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedInputError(f"Invalid subject resource: {e!r}") from e

        try:
            subject_type = SubjectType(kind)
        except ValueError as e:
            raise MalformedInputError(f"Unknown subject type '{kind}'") from e

        if not isinstance(data, dict):
            raise MalformedInputError(f"Subject {subject_id} has no data object")

        return cls(id=subject_id, type=subject_type, data=data)
