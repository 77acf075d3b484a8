"""API layer - FastAPI routes and dependencies."""

from .dependencies import (
    ReviewSessionDep,
    cleanup_dependencies,
    get_review_session,
    init_dependencies,
)
from .routes import cards_router, session_router, submissions_router

__all__ = [
    # Routes
    "session_router",
    "cards_router",
    "submissions_router",
    # Dependencies
    "init_dependencies",
    "cleanup_dependencies",
    "get_review_session",
    # Type aliases
    "ReviewSessionDep",
]
