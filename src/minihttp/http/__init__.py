"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

Translates between raw bytes and structured HTTP messages.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADER LINES (headers.py)                                           │
    │ Ordered raw header lines with case-insensitive prefix lookup        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ REQUEST READER (request.py)                                         │
    │ Buffered byte stream → HTTPRequest (method, path, headers, body)    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTER (router.py)                                                  │
    │ (method, path) → handler, ordered exact/prefix rules, 404/405       │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE (response.py)                                              │
    │ HTTPResponse + ResponseBuilder, serialized with to_bytes()          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES (status_codes.py)                                      │
    │ 200 / 201 / 404 / 405 with reason phrases                           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .headers import HeaderLines
from .request import HTTPRequest, RequestReader, HTTPParseError, read_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,                  # 200 OK
    created,             # 201 Created
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
)
from .router import Router, Route, RouteMatch, Handler
from .status_codes import HTTPStatus

__all__ = [
    # Request reading
    "HeaderLines",
    "HTTPRequest",
    "RequestReader",
    "HTTPParseError",
    "read_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "not_found",
    "method_not_allowed",

    # Routing
    "Router",
    "Route",
    "RouteMatch",
    "Handler",

    # Status codes
    "HTTPStatus",
]
