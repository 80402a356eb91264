"""Standard controls API module."""

from controlgap.api.standard_controls.routes import router as standard_controls_router

__all__ = ["standard_controls_router"]
