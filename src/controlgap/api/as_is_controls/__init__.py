"""As-is controls API module."""

from controlgap.api.as_is_controls.routes import router as as_is_controls_router

__all__ = ["as_is_controls_router"]
