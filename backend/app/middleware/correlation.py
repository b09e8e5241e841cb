"""
Correlation ID middleware
=========================
Tags every request with an X-Correlation-ID (taken from the client or freshly
minted) so the log lines of one call, including a long chat stream, can be
grouped. The id is echoed back in the response headers.
"""
from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)

        # for streaming responses this is time-to-headers, not time-to-last-byte
        logger.info(
            "%s %s -> %s (%.1f ms) cid=%s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            correlation_id,
        )
        response.headers["X-Correlation-ID"] = correlation_id
        return response
