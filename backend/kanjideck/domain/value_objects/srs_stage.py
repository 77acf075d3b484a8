"""SRS stage change value object."""

from dataclasses import dataclass

# WaniKani stage 9 is "burned": the item leaves the review rotation.
BURNED_SRS_STAGE = 9


@dataclass(frozen=True)
class SrsStageChange:
    """Expected SRS stage advance after a fully correct review.

    The server is the authority on the real new stage; this is what the UI
    shows right away while the submission is still being delivered.
    """

    current: int
    next: int

    @classmethod
    def advance(cls, current: int) -> "SrsStageChange":
        """Build the change for one correct review at ``current`` stage."""
        return cls(current=current, next=min(current + 1, BURNED_SRS_STAGE))
