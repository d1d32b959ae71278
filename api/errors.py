"""
Central exception handlers.

Every error leaves the API as ``{"message": ...}``; a formatted
``stack`` is added only in the development environment.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.errors import AuthServiceError
from config.settings import Settings

logger = logging.getLogger(__name__)


def error_body(exc: BaseException, message: str, settings: Settings) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if settings.is_development:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map domain, validation and unexpected errors onto the JSON envelope."""

    @app.exception_handler(AuthServiceError)
    async def auth_error_handler(request: Request, exc: AuthServiceError):
        if exc.status_code >= 500:
            logger.exception(
                "%s %s failed (%s)", request.method, request.url.path, exc.kind.value,
                exc_info=exc,
            )
        else:
            logger.info(
                "%s %s → %d %s", request.method, request.url.path, exc.status_code, exc.kind.value,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc, exc.message, settings),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(exc, "Invalid request body", settings),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(exc, "Internal server error", settings),
        )
