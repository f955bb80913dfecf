"""Maps the core's typed failures onto HTTP responses."""
from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from course_admin.domain.common.errors import (
    CourseAdminError,
    Forbidden,
    NetworkError,
    NotFound,
    StoreError,
    TreeBusyError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (ValidationError, 422),
    (NotFound, 404),
    (Forbidden, 403),
    (TreeBusyError, 409),
    (NetworkError, 503),
]


def status_for(error: CourseAdminError) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status
    if isinstance(error, StoreError) and error.status and 400 <= error.status < 500:
        return 400
    return 502


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CourseAdminError)
    async def _handle_course_admin_error(request: Request, exc: CourseAdminError):
        status = status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %r", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status,
            content={"success": False, "error": exc.message, "kind": exc.kind},
        )
