"""Engine error taxonomy and the JSON error envelope handlers."""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class EngineError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal error"

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class InvalidInputError(EngineError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid input"


class NotFoundError(EngineError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class UpstreamFailure(EngineError):
    """A record-source collaborator failed while loading data."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error = "Upstream failure"


def _envelope(status_code: int, error: str, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message}, headers=headers)


async def _handle_engine_error(request: Request, exc: EngineError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return _envelope(exc.status_code, exc.error, exc.message)


async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info("%s %s answered %s", request.method, request.url.path, exc.status_code)
    error = HTTPStatus(exc.status_code).phrase
    message = exc.detail if isinstance(exc.detail, str) else error
    return _envelope(exc.status_code, error, message, headers=getattr(exc, "headers", None))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}" for err in exc.errors()
    )
    logger.info("%s %s rejected: %s", request.method, request.url.path, details)
    return _envelope(status.HTTP_400_BAD_REQUEST, InvalidInputError.error, details or "Request validation failed")


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = getattr(request.state, "failure_label", EngineError.error)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, error, str(exc) or exc.__class__.__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map every failure onto a `{error, message}` body."""

    app.add_exception_handler(EngineError, _handle_engine_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected)


__all__ = [
    "EngineError",
    "InvalidInputError",
    "NotFoundError",
    "UpstreamFailure",
    "register_error_handlers",
]
