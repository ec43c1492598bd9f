"""Request logging middleware with correlation IDs."""

import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from weather_monitor.utils.logging_config import get_logger

logger = get_logger("weather_monitor.requests")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with its latency and tag the response with a request id.

    A caller-supplied X-Request-ID is reused; otherwise a new one is generated.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} failed "
                f"after {latency_ms}ms: {type(e).__name__}: {e}"
            )
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({latency_ms}ms)"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
