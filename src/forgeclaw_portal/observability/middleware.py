"""
forgeclaw_portal.observability.middleware

Per-request logging context and access log.

Every log line written while a request is handled carries `request_id`, `method`
and `path`. The id comes from the caller's `x-request-id` header when present
(the portal frontend forwards it) and is echoed back on the response.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from forgeclaw_portal.observability.logging import get_logger

REQUEST_ID_HEADER = "x-request-id"

access_log = get_logger("forgeclaw_portal.access")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        client = request.client.host if request.client else None
        try:
            response = await call_next(request)
        except Exception:
            access_log.exception("http_request_failed", client=client)
            raise
        else:
            access_log.info(
                "http_request",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                client=client,
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
