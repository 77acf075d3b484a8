"""Demo deck adapter for trying the app without a WaniKani account.

Loads reviews from an embedded JSON file instead of the WaniKani API.
Use REVIEW_ADAPTER=demo to enable.
"""

import json
from dataclasses import replace
from importlib import resources
from pathlib import Path

from kanjideck.domain.entities.review import Review
from kanjideck.domain.entities.subject import Subject
from kanjideck.domain.value_objects.review_completion import ReviewCompletion
from kanjideck.domain.value_objects.srs_stage import SrsStageChange
from kanjideck.ports.review_service import LoadedReviews


class DemoDeckAdapter:
    """ReviewsLoader and ReviewCompletionService with an embedded deck.

    Every load returns the whole deck, whatever was submitted before.
    Submissions are kept in memory only, with a simplified SRS rule:
    a correct review moves up one stage, an incorrect one down one stage
    (never below 1).
    """

    def __init__(self) -> None:
        self._data = self._load_data()
        self._submitted: dict[int, Review] = {}

    @property
    def submitted(self) -> dict[int, Review]:
        """Reviews submitted so far, keyed by review ID."""
        return dict(self._submitted)

    def _load_data(self) -> dict:
        """Load the embedded deck.

        Uses importlib.resources for reliable package data access.
        Falls back to file path if running outside package context.
        """
        try:
            data_path = resources.files("kanjideck.adapters.data").joinpath("demo_deck.json")
            with data_path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (ModuleNotFoundError, FileNotFoundError, TypeError):
            file_path = Path(__file__).parent / "data" / "demo_deck.json"
            with open(file_path, encoding="utf-8") as f:
                return json.load(f)

    async def load_reviews(self) -> LoadedReviews:
        """Get every demo review (always due)."""
        return LoadedReviews(
            reviews=[Review.from_api(a) for a in self._data["assignments"]],
            subjects=[Subject.from_api(s) for s in self._data["subjects"]],
        )

    async def submit_review(self, completion: ReviewCompletion) -> Review:
        """Accept a review and return it with its new stage."""
        review = next(
            (Review.from_api(a) for a in self._data["assignments"] if a["id"] == completion.review_id),
            None,
        )
        if review is None:
            review = Review(id=completion.review_id, subject_id=completion.subject_id, srs_stage=1)

        if completion.is_correct:
            stage = SrsStageChange.advance(review.srs_stage).next
        else:
            stage = max(1, review.srs_stage - 1)

        updated = replace(review, srs_stage=stage)
        self._submitted[completion.review_id] = updated
        return updated

    async def close(self) -> None:
        """No-op cleanup."""
        pass
