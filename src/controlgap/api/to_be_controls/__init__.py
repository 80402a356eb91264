"""To-be controls API module."""

from controlgap.api.to_be_controls.routes import router as to_be_controls_router

__all__ = ["to_be_controls_router"]
