# backend/app/middleware/timing.py
"""
Request timing middleware for performance monitoring.
"""

from collections.abc import Awaitable, Callable
import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.config import settings

logger = logging.getLogger(__name__)

_UNTIMED_PATHS = frozenset({f"{settings.api_prefix}/health", f"{settings.api_prefix}/metrics"})


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to measure and log request processing time.

    Adds an X-Process-Time header and warns about requests slower than
    ``settings.slow_request_threshold_ms``.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in _UNTIMED_PATHS:
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        response.headers["X-Process-Time"] = f"{process_time:.2f}ms"

        if process_time > settings.slow_request_threshold_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {process_time:.2f}ms"
            )

        return response
