import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from academic_reporting.core.logging_config import generate_request_id, logger, set_request_id, set_user_id


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        set_user_id("")

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        logger.log_request(request.method, request.url.path, response.status_code, duration_ms)
        return response
