"""Request id and access logging middleware."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("app.access")

QUIET_PATHS = {"/api/v1/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assign a request id and log method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        path = request.url.path
        if path in QUIET_PATHS:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status_code,
            duration_ms,
            request_id,
            client_ip,
        )
        return response
