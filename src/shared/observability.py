"""
Request observability for the HTTP gateway.

Logs every request with method, path, status and duration, tagged with
a correlation ID that is echoed back in the ``X-Correlation-ID`` header
so a client report can be matched to server logs.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.shared.logging import generate_correlation_id, setup_logging

logger = setup_logging("shared.observability", level="INFO")

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for per-request logging.

    Captures:
    - Request method and path
    - Response status code
    - Request duration
    - Correlation ID (taken from the request header or generated)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        request.state.correlation_id = correlation_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"[{correlation_id}] {request.method} {request.url.path} failed: {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"[{correlation_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms:.1f} ms)"
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
