"""Maturity assessments API module."""

from controlgap.api.maturity_assessments.routes import router as maturity_assessments_router

__all__ = ["maturity_assessments_router"]
