"""Gaps API module."""

from controlgap.api.gaps.routes import router as gaps_router

__all__ = ["gaps_router"]
