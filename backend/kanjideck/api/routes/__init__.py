"""API routes module."""

from .cards import router as cards_router
from .session import router as session_router
from .submissions import router as submissions_router

__all__ = ["session_router", "cards_router", "submissions_router"]
