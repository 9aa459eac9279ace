"""Standard error handler — consistent error responses across all routes."""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..notifications.events import EventTimeoutError
from ..notifications.platform import NotificationDisplayError
from ..storage.base import StorageError
from ..utils.logging import get_logger

logger = get_logger("middleware.error_handler")


def _error_body(request: Request, status_code: int, detail, **extra) -> dict:
    return {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        **extra,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": getattr(request.state, "request_id", None),
    }


def register_error_handlers(app: FastAPI) -> None:
    """Register standard error handlers on the app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=_error_body(request, 422, "Validation error", errors=exc.errors()),
        )

    @app.exception_handler(NotificationDisplayError)
    async def display_error_handler(request: Request, exc: NotificationDisplayError):
        return JSONResponse(
            status_code=502,
            content=_error_body(request, 502, f"Notification display failed: {exc}"),
        )

    @app.exception_handler(EventTimeoutError)
    async def event_timeout_handler(request: Request, exc: EventTimeoutError):
        return JSONResponse(
            status_code=504,
            content=_error_body(request, 504, str(exc)),
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("storage_error", error=str(exc), path=str(request.url.path))
        return JSONResponse(
            status_code=503,
            content=_error_body(request, 503, "Storage unavailable"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            error=str(exc),
            request_id=getattr(request.state, "request_id", None),
            path=str(request.url.path),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, 500, "Internal server error"),
        )
