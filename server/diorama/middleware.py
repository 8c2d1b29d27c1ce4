# ─────────────────────────────────────────────────────────────────────────────
# Request Middleware — request ID, timing, structured logging
# ─────────────────────────────────────────────────────────────────────────────


import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by uptime checks and Prometheus scrapes
QUIET_PATH_PREFIXES = ("/health", "/metrics")

_CLIENT_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(header_value: str | None) -> str:
    """Reuse the caller's request ID when it is a short token, else mint one.

    Lets a client match its own retries to server log lines. Empty,
    oversized or oddly-charactered values are replaced, never echoed into
    logs and headers.
    """
    if header_value and _CLIENT_REQUEST_ID.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request ID and route into structlog contextvars, logs timing.

    Every pipeline log line emitted while handling the request carries both.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        path = request.url.path
        structlog.contextvars.bind_contextvars(request_id=request_id, path=path)
        start = time.perf_counter()

        try:
            response: Response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 1)

            if not path.startswith(QUIET_PATH_PREFIXES):
                logger.info(
                    "request_completed",
                    method=request.method,
                    status=response.status_code,
                    duration_ms=duration_ms,
                )
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "path")

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time-Ms"] = str(duration_ms)
        return response
