"""
Observability Middleware.

Adds correlation IDs and structured logging context to requests.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Configure structured logger
logger = logging.getLogger("tracking")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
REQUEST_LOG_FORMAT = "%s: %s %s -> %s in %.2fms (correlation_id=%s)"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the root logger once and set the tracking level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logger.setLevel(level.upper())


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # 1. Generate or extract Correlation ID
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))

        # 2. Start Timer
        start_time = time.perf_counter()

        # 3. Process Request
        response = await call_next(request)

        # 4. Calculate Duration
        process_time = (time.perf_counter() - start_time) * 1000  # ms

        # 5. Add Header to Response
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(process_time)

        # 6. Structured Log
        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(process_time, 2),
            "ip": request.client.host if request.client else "unknown"
        }

        # Log level based on status
        if response.status_code >= 500:
            level, label = logging.ERROR, "Request Failed"
        elif response.status_code >= 400:
            level, label = logging.WARNING, "Request Error"
        else:
            level, label = logging.INFO, "Request API"
        logger.log(
            level, REQUEST_LOG_FORMAT, label,
            log_data["method"], log_data["path"], log_data["status_code"],
            log_data["duration_ms"], log_data["correlation_id"],
            extra=log_data
        )

        return response
