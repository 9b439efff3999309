import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.monotonic()
        client = request.client.host if request.client else None

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "HTTP Request Exception",
                method=request.method,
                path=request.url.path,
                duration=round((time.monotonic() - start_time) * 1000, 2),
                client=client,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        logger.info(
            "HTTP Request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=round((time.monotonic() - start_time) * 1000, 2),
            client=client,
            delivery=request.headers.get("X-GitHub-Delivery"),
        )
        return response
