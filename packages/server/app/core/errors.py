"""
Error taxonomy and the FastAPI exception handlers that render it.

Every operation reports exactly one error class; handlers translate it into
one of three body shapes:

- ``{status, message, statusCode}`` for most failures
- ``{errors: [{field, message}, ...]}`` for input validation and duplicates
- ``{error}`` for bearer-credential rejections from the access guard
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = structlog.get_logger()


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, *, status: Optional[str] = None):
        self.message = message or self.default_message
        self.status = status or HTTPStatus(self.status_code).phrase
        super().__init__(self.message)

    def body(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "statusCode": self.status_code,
        }


class ValidationError(AppError):
    """Per-field input validation failure."""

    status_code = 422
    default_message = "Validation failed"

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__(self.default_message)
        self.errors = errors

    def body(self) -> dict[str, Any]:
        return {"errors": self.errors}


class Conflict(ValidationError):
    """A unique value (e.g. email) is already taken. Reported as 422."""

    def __init__(self, field: str, message: str):
        super().__init__([{"field": field, "message": message}])


class Unauthenticated(AppError):
    """Missing, malformed, invalid or expired bearer credential."""

    status_code = 401
    default_message = "Unauthorized"

    def body(self) -> dict[str, Any]:
        return {"error": self.message}


class Forbidden(AppError):
    """Caller may not act on the target. Reported as 401; no 403 is used."""

    status_code = 401
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not Found"


class BadRequest(AppError):
    status_code = 400
    default_message = "Bad Request"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal Server Error"

    def body(self) -> dict[str, Any]:
        # detail goes to the log only
        return {
            "status": self.status,
            "message": self.default_message,
            "statusCode": self.status_code,
        }


class ConfigError(InternalError):
    """Required configuration (e.g. the signing secret) is absent or invalid."""


class HashingError(InternalError):
    """The password hashing library failed."""


# ---------------------------------------------------------------------------
# Request validation -> field errors
# ---------------------------------------------------------------------------

# Messages keyed by (wire field, pydantic error type), then by error type alone.
FIELD_MESSAGES: dict[tuple[str, str], str] = {
    ("email", "value_error"): "invalid email",
    ("password", "value_error"): "must not be more than 72 bytes",
}

TYPE_MESSAGES: dict[str, str] = {
    "missing": "field is required",
    "string_type": "field must be a string",
    "json_invalid": "request body is not valid JSON",
    "model_attributes_type": "request body must be a JSON object",
    "dict_type": "request body must be a JSON object",
}


def _field_name(loc: tuple) -> str:
    # loc looks like ("body", "firstName"); wire names come from schema aliases
    names = [str(part) for part in loc[1:] if isinstance(part, str)]
    return ".".join(names) if names else "body"


def field_message(field: str, error_type: str, ctx: Optional[dict] = None) -> str:
    ctx = ctx or {}
    if (field, error_type) in FIELD_MESSAGES:
        return FIELD_MESSAGES[(field, error_type)]
    if error_type == "string_too_short":
        min_length = ctx.get("min_length", 1)
        if min_length == 1:
            return TYPE_MESSAGES["missing"]
        return f"must be at least {min_length} characters long"
    if error_type == "string_too_long":
        return f"must not be more than {ctx.get('max_length')} characters"
    return TYPE_MESSAGES.get(error_type, "invalid value")


def field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        field = _field_name(tuple(err.get("loc", ())))
        errors.append(
            {"field": field, "message": field_message(field, err["type"], err.get("ctx"))}
        )
    return errors


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        log.error(
            "request.failed",
            path=request.url.path,
            method=request.method,
            error=type(exc).__name__,
            detail=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": field_errors(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception(
        "request.unhandled_exception",
        path=request.url.path,
        method=request.method,
        exception_type=type(exc).__name__,
    )
    return JSONResponse(status_code=500, content=InternalError().body())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error taxonomy handlers to the FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
