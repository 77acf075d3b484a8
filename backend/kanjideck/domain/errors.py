"""Domain errors for data-integrity violations.

These signal a programming or corrupt-load error. They are never turned into
recoverable state and should reach the caller unchanged.
"""


class MalformedInputError(Exception):
    """Raised when input data breaks a domain invariant."""

    pass


class MissingSubjectError(MalformedInputError):
    """Raised when a review references a subject that was not loaded."""

    def __init__(self, review_id: int, subject_id: int):
        self.review_id = review_id
        self.subject_id = subject_id
        super().__init__(f"Review {review_id} references unknown subject {subject_id}")


class UnknownReviewError(MalformedInputError):
    """Raised when a card references a review the session does not track."""

    def __init__(self, review_id: int):
        self.review_id = review_id
        super().__init__(f"Review {review_id} is not part of this session")
