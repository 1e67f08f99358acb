"""
FastAPI middleware for logging API requests.

Uses pure ASGI middleware (not BaseHTTPMiddleware) so responses pass
through untouched.

Each request produces one completion line with method, path, status code
and processing time. Failed requests also carry the error detail from the
response body. Message bodies are never logged.
"""

import json
import logging
import time
from typing import List, Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import truncate_text

logger = logging.getLogger(__name__)


def _extract_error_reason(response_text: str) -> Optional[str]:
    """Extract a concise error reason from a response body."""
    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError:
        return truncate_text(response_text, max_length=500) or None
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            value = payload.get(key)
            if value:
                return truncate_text(str(value), max_length=500)
    return None


class RequestLoggingMiddleware:
    """Pure ASGI middleware to log every API request."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[List[str]] = None):
        """
        Initialize the logging middleware.

        Args:
            app: The ASGI application
            exclude_paths: Paths that are not logged (e.g., ["/health"])
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        status_code = 0
        error_chunks: List[bytes] = []

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            elif message["type"] == "http.response.body" and status_code >= 400:
                error_chunks.append(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, logging_send)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "error": str(e),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        error_reason = None
        if error_chunks:
            error_reason = _extract_error_reason(b"".join(error_chunks).decode("utf-8", errors="ignore"))

        # Log level follows the status code
        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "error_reason": error_reason,
            }}
        )
