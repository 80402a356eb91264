"""Processes API module."""

from controlgap.api.processes.routes import router as processes_router

__all__ = ["processes_router"]
