"""
Domain errors and their HTTP mapping.
Challenge: Business-rule failures carry a structured message; infrastructure
failures are logged and surfaced as a generic 500 without leaking internals.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for every error the API reports to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidOperation(AppError):
    """Business-rule violation (self-interest, already decided)."""

    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(AppError):
    """Duplicate interest (400) or a write that lost a race (500)."""

    status_code = status.HTTP_400_BAD_REQUEST

    @classmethod
    def lost_race(cls, message: str) -> "Conflict":
        return cls(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class ServiceUnavailable(AppError):
    """Store or identity service unreachable or timed out."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _validation_message(exc: RequestValidationError) -> str:
    """First validation error as a short sentence, e.g. 'name is required'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc) or "body"
    if first.get("type") == "missing":
        return f"{field} is required"
    if first.get("type") == "extra_forbidden":
        return f"{field} is not an updatable field"
    return f"{field}: {first.get('msg', 'invalid value')}"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        # Lost races keep their message; other 5xx hide internals
        if not isinstance(exc, Conflict):
            return JSONResponse(status_code=exc.status_code, content={"detail": "Service temporarily unavailable"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _validation_message(exc)},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
