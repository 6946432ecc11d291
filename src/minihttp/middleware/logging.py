"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log record per handled request, on the "minihttp.access" logger.

    text:  127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /echo/abc" 200 3 0.12ms
    json:  {"method": "GET", "path": "/echo/abc", "status_code": 200, ...}

Requests that never reach the router (parse errors, dropped connections)
are not access-logged; the connection supervisor reports those on the
"minihttp.server" logger instead.

Nothing is added to the response: the access log is purely a side channel.

=============================================================================
"""

import time
import json
import logging
from dataclasses import dataclass, asdict

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


# Namespaced logger so access logs can be routed separately:
#   logging.getLogger("minihttp.access").addHandler(file_handler)
logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """Structured log entry for a request."""

    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Format in the style of the Apache common log format."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Should be FIRST in the pipeline so the logged size is the size that
    actually goes on the wire (after compression).

        pipeline.add(LoggingMiddleware(log_format="json"))
        pipeline.add(CompressionMiddleware())
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" (human readable) or "json" (one object per line).
            log_level: Level the access records are emitted at.
        """
        if log_format not in ("text", "json"):
            raise ValueError(f"Unknown log format: {log_format!r}")
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            # Still log failed requests, then let the supervisor abort
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        log_entry = RequestLog(
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
