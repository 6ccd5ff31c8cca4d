from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from companies_api.core.logging import get_logger
from companies_api.middleware.rate_limit import client_ip

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        response: Response | None = None

        logger.info(
            "http.request_received",
            method=request.method,
            path=request.url.path,
            ip=client_ip(request),
            user_agent=request.headers.get("User-Agent", ""),
        )

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            logger.info(
                "http.response_sent",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code if response is not None else 500,
                duration_ms=duration_ms,
                ip=client_ip(request),
            )
