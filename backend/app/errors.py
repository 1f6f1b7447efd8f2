"""Typed error taxonomy for carpool operations and its FastAPI handler.

Services raise these; a single exception handler registered in ``app.main``
turns them into ``{"detail": ..., "error": ...}`` JSON responses.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CarpoolError(Exception):
    """Base error with an HTTP status and a machine-readable kind."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class Unauthorized(CarpoolError):
    status_code = status.HTTP_403_FORBIDDEN


class NotAuthenticated(Unauthorized):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(CarpoolError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(CarpoolError):
    status_code = status.HTTP_409_CONFLICT


class CapacityExceeded(CarpoolError):
    status_code = status.HTTP_409_CONFLICT


class Conflict(CarpoolError):
    status_code = status.HTTP_409_CONFLICT


class NoDriversAvailable(CarpoolError):
    status_code = 422


class InvalidRsvp(CarpoolError):
    status_code = status.HTTP_400_BAD_REQUEST


class EmailNotConfigured(CarpoolError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def carpool_error_handler(request: Request, exc: CarpoolError) -> JSONResponse:
    """FastAPI exception handler for CarpoolError."""
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
    content = {"detail": exc.message, "error": exc.kind}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
