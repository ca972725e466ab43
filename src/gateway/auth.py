"""
API key authentication for the /api routes.

When no keys are configured every request passes (development mode).
Otherwise an ``X-API-Key`` header carrying one of the configured keys
is required on everything under ``/api`` except the health check.
"""

from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.shared.logging import setup_logging

logger = setup_logging("gateway.auth", level="INFO")

API_KEY_HEADER = "X-API-Key"
PUBLIC_API_PATHS = {"/api/health"}


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject /api requests that lack a valid API key."""

    def __init__(self, app, api_keys: set[str] | None = None):
        super().__init__(app)
        self._api_keys = set(api_keys or ())

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if (
            not self._api_keys
            or not path.startswith("/api")
            or path in PUBLIC_API_PATHS
            or request.method == "OPTIONS"
        ):
            return await call_next(request)

        api_key = request.headers.get(API_KEY_HEADER)
        if not api_key or api_key not in self._api_keys:
            logger.warning(f"Rejected {request.method} {path}: missing or invalid API key")
            return JSONResponse(
                status_code=401,
                content={"error": "Unauthorized", "message": "Valid API key required"},
            )

        return await call_next(request)
