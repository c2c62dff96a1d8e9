"""Log every request with a per-request id bound to the log context."""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.observability import bind_context, clear_context, get_logger

log = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        clear_context()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        bind_context(request_id=request_id)

        started = time.perf_counter()
        log.info("{} {}", request.method, request.url.path)
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        log.debug(
            "{} {} -> {} in {:.1f}ms",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        response.headers["X-Request-ID"] = request_id
        return response
