from unittest.mock import AsyncMock

import pytest

from kanjideck.domain.entities.review import Review
from kanjideck.domain.entities.subject import Subject
from kanjideck.domain.value_objects.subject_type import SubjectType
from kanjideck.ports.review_service import LoadedReviews


def make_subject(subject_id: int, subject_type: SubjectType, characters: str = "人") -> Subject:
    return Subject(
        id=subject_id,
        type=subject_type,
        data={"characters": characters, "meanings": [{"meaning": "Person", "primary": True}]},
    )


@pytest.fixture
def subjects():
    """One subject of every kind."""
    return [
        make_subject(10, SubjectType.KANJI, "人"),
        make_subject(20, SubjectType.VOCABULARY, "一人"),
        make_subject(30, SubjectType.RADICAL, "一"),
        make_subject(40, SubjectType.KANA_VOCABULARY, "こんにちは"),
    ]


@pytest.fixture
def reviews():
    """Kanji and vocabulary (2 cards each), radical and kana vocabulary (1 card each)."""
    return [
        Review(id=1, subject_id=10, srs_stage=3),
        Review(id=2, subject_id=20, srs_stage=1),
        Review(id=3, subject_id=30, srs_stage=8),
        Review(id=4, subject_id=40, srs_stage=0),
    ]


@pytest.fixture
def review_service(reviews, subjects):
    """AsyncMock playing both loader and completion-service roles.

    Submissions echo the review back one stage higher.
    """
    service = AsyncMock()
    service.load_reviews.return_value = LoadedReviews(reviews=reviews, subjects=subjects)

    async def submit(completion):
        return Review(id=completion.review_id, subject_id=completion.subject_id, srs_stage=5)

    service.submit_review.side_effect = submit
    return service
