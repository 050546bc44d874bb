from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.errors import AppError, from_inspector_error
from dbinspector.errors.exceptions import InspectorError

logger = logging.getLogger(__name__)


def _error_response(request: Request, exc: AppError) -> JSONResponse:
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    payload = {
        "error": {
            "code": exc.code,
            "message": exc.message,
            "details": exc.details,
            "retryable": bool(exc.retryable),
            "request_id": request_id,
            "extra": exc.extra or {},
        }
    }

    headers = {"X-Request-ID": request_id}
    if exc.retryable:
        headers["Retry-After"] = "2"

    return JSONResponse(status_code=exc.http_status, content=payload, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for the FastAPI application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(InspectorError)
    async def inspector_error_handler(
        request: Request, exc: InspectorError
    ) -> JSONResponse:
        # facade errors that escaped the service layer untranslated
        logger.debug("Inspector error on %s: %s", request.url.path, exc)
        return _error_response(request, from_inspector_error(exc))
