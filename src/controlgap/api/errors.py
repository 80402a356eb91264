"""Translation of domain errors into JSON error responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from controlgap.errors import ControlGapError, ValidationError

logger = logging.getLogger(__name__)


def error_body(error: ControlGapError) -> dict:
    """Build the response body of a domain error."""
    body = {"error": error.message, "kind": error.kind}
    if isinstance(error, ValidationError):
        body["fields"] = error.fields
    return body


async def controlgap_error_handler(request: Request, exc: ControlGapError) -> JSONResponse:
    """Render a domain error with its HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request schema failures in the validation error shape."""
    fields: list[str] = []
    missing_only = True
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)
        if err.get("type") != "missing":
            missing_only = False

    if missing_only:
        error = ValidationError(fields)
    else:
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()) if p != 'body')}: {e.get('msg')}"
            for e in exc.errors()
        )
        error = ValidationError(fields, f"Invalid request: {details}")
    return JSONResponse(status_code=error.status_code, content=error_body(error))


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on an app."""
    app.add_exception_handler(ControlGapError, controlgap_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
