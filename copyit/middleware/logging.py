"""
Logging Middleware for Request/Response Logging

This middleware logs all HTTP requests and responses for observability.
It captures:
- Request method and path (snippet paths are replaced by a placeholder)
- Response status code
- Request processing time
- Client IP address

Snippet content and query strings are never logged. Snippet paths are
redacted as well, since a one-time path grants access to its content.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from copyit.core.setting import settings

logger = logging.getLogger("copyit")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Routes that are not snippet paths and can be logged verbatim
PUBLIC_PATHS = {"/", "/health", "/docs", "/redoc", "/openapi.json"}
PUBLIC_PREFIXES = ("/api/", "/docs/")


def loggable_path(path: str) -> str:
    """Return the request path with any snippet path redacted."""
    if path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES):
        return path
    return "/{path}"


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """
    Configure root logging for the service.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    It wraps the request/response cycle to add logging without
    modifying endpoint code.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process request and log details.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/endpoint in the chain

        Returns:
            Response object
        """
        client_ip = self._get_client_ip(request)

        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time

        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP
        logger.info(
            f"{request.method} {loggable_path(request.url.path)} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{client_ip}"
        )

        response.headers["X-Process-Time"] = str(process_time)

        return response

    def _get_client_ip(self, request: Request) -> str:
        """
        Extract client IP address from request.

        Handles proxies and load balancers by checking X-Forwarded-For header.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # X-Forwarded-For can contain multiple IPs, take the first one
            return forwarded_for.split(",")[0].strip()

        return request.client.host if request.client else "unknown"


def add_logging_middleware(app):
    """
    Add logging middleware to FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)
