"""Review type value object (which side of a subject is being quizzed)."""

from enum import StrEnum


class ReviewType(StrEnum):
    """Question kinds a review can be asked as.

    - MEANING: "what does this mean?"
    - READING: "how is this read?"
    """

    MEANING = "meaning"
    READING = "reading"
