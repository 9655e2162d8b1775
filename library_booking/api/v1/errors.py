"""
Translation of domain failures into HTTP responses.

Domain errors keep their kind and message. Anything else becomes an
opaque 500: the traceback goes to the log, never to the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from library_booking.domain.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    LibraryError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
}


def _error_response(status_code: int, error: LibraryError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error.kind, "detail": error.message},
    )


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    status_code = _STATUS_BY_ERROR.get(type(exc))
    if status_code is None:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError())
    return _error_response(status_code, exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on the application."""
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
