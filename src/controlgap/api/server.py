"""FastAPI server for ControlGap."""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from controlgap import __version__
from controlgap.api.as_is_controls import as_is_controls_router
from controlgap.api.errors import register_error_handlers
from controlgap.api.gaps import gaps_router
from controlgap.api.maturity_assessments import maturity_assessments_router
from controlgap.api.processes import processes_router
from controlgap.api.rate_limit import limiter
from controlgap.api.routes import router
from controlgap.api.section2 import section2_router
from controlgap.api.standard_controls import standard_controls_router
from controlgap.api.to_be_controls import to_be_controls_router
from controlgap.config import get_org_settings
from controlgap.db import close_db, init_db

logger = logging.getLogger(__name__)

# --- Logging configuration ---
_log_level = os.environ.get("CONTROLGAP_LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# --- CORS configuration ---
_DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:8080"


def _get_cors_origins() -> list[str]:
    """Parse CORS origins from CONTROLGAP_CORS_ORIGINS env var.

    Rejects wildcard '*' when credentials are enabled.
    """
    raw = os.environ.get("CONTROLGAP_CORS_ORIGINS", _DEFAULT_CORS_ORIGINS)
    if raw.strip() == "*":
        logger.warning(
            "CONTROLGAP_CORS_ORIGINS='*' is insecure with credentials. "
            "Using default dev origins instead."
        )
        raw = _DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if os.environ.get("CONTROLGAP_ENV") == "production":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response


# --- Request logging middleware ---
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all API requests."""

    async def dispatch(self, request: Request, call_next):
        start = datetime.utcnow()
        response = await call_next(request)
        duration = (datetime.utcnow() - start).total_seconds() * 1000
        if request.url.path.startswith("/api/"):
            logger.info(
                "%s %s %d %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                duration,
            )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_org_settings(reload=True)
    logger.info(
        "Starting ControlGap server for %s (partial coverage: %s)",
        settings.organization.name,
        settings.gap_analysis.partial_coverage.value,
    )
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down ControlGap server")
    await close_db()


app = FastAPI(
    title="ControlGap API",
    description=(
        "Maturity-driven control applicability, gap detection and to-be control synthesis"
    ),
    version=__version__,
    lifespan=lifespan,
)

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Domain errors as {"error", "kind"} bodies
register_error_handlers(app)

# Security headers
app.add_middleware(SecurityHeadersMiddleware)

# Request logging
app.add_middleware(RequestLoggingMiddleware)

# CORS configuration for web UI
cors_origins = _get_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health / Readiness endpoints ---
@app.get("/health")
async def health_check():
    """Health check endpoint for orchestration."""
    return {"status": "healthy"}


@app.get("/ready")
async def readiness_check():
    """Readiness check - verifies database is accessible."""
    from controlgap.db.database import get_engine

    engine = get_engine()
    if engine is None:
        return JSONResponse(
            status_code=503, content={"status": "not ready", "reason": "database not initialized"}
        )
    try:
        from sqlalchemy import text

        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        logger.error("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503, content={"status": "not ready", "reason": "database error"}
        )


# Include API routes with /api prefix
app.include_router(router, prefix="/api")
app.include_router(processes_router, prefix="/api")
app.include_router(maturity_assessments_router, prefix="/api")
app.include_router(standard_controls_router, prefix="/api")
app.include_router(as_is_controls_router, prefix="/api")
app.include_router(gaps_router, prefix="/api")
app.include_router(to_be_controls_router, prefix="/api")
app.include_router(section2_router, prefix="/api")
