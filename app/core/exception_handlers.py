"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every error body has the
shape {message, details, field?}; the status comes from the exception's
error_code, never from its message text.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.exceptions import CoworkingException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "CONFLICT": 400,
    "INVALID_STATE": 400,
    "INVALID_IDENTIFIER": 400,
    "RESOURCE_NOT_FOUND": 404,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "INFRASTRUCTURE_ERROR": 500,
}

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def status_for(exc: CoworkingException) -> int:
    """HTTP status for a domain exception (400 for unknown codes)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _coworking_exception_handler(
    request: Request, exc: CoworkingException
) -> JSONResponse:
    """Return JSON from CoworkingException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s: %s %s", exc.error_code, exc.message, exc.details)
    else:
        logger.debug("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _field_from_loc(loc: tuple[Any, ...] | list[Any]) -> str | None:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or None


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 carrying the first error's field and message."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    content: dict[str, Any] = {
        "message": first.get("msg", "Datos de entrada inválidos"),
        "details": [
            {"field": _field_from_loc(e.get("loc", ())), "message": e.get("msg")}
            for e in errors
        ],
    }
    field = _field_from_loc(first.get("loc", ()))
    if field:
        content["field"] = field
    return JSONResponse(status_code=400, content=content)


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (unknown route, wrong method)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail, "details": {}},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 with the raw message in details."""
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"message": INTERNAL_ERROR_MESSAGE, "details": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: CoworkingException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(CoworkingException, _coworking_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
