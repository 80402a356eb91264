"""Section 2 (per-risk maturity and controls) API module."""

from controlgap.api.section2.routes import router as section2_router

__all__ = ["section2_router"]
