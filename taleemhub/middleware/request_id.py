"""Request ID middleware — adds correlation IDs to every request."""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..utils.logging import bind_request_context, clear_request_context


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID and binds it, with method and path, to the log context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        bind_request_context(request_id, request.method, request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response
