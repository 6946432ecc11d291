"""
=============================================================================
CONTENT ENCODING (GZIP)
=============================================================================

Negotiates and applies gzip compression to payload responses, and stamps
every payload response with its final Content-Length.

=============================================================================
HOW IT WORKS
=============================================================================

    1. Let the handler produce its response
    2. Skip responses without a payload (200 on "/", 201, 404, 405)
    3. Look at the FIRST "Accept-Encoding:" request line
    4. Split its value on commas, strip each token
    5. Exactly "gzip" among the tokens?
         yes → gzip the body, add "Content-Encoding: gzip"
         no  → body unchanged
    6. Add "Content-Length" = length of the body as it will be sent

=============================================================================
TOKEN MATCHING
=============================================================================

    Accept-Encoding: gzip               → gzip
    Accept-Encoding: deflate, gzip      → gzip
    accept-encoding: gzip               → gzip   (header name any case)
    Accept-Encoding: GZIP               → none   (token is case-sensitive)
    Accept-Encoding: gzip;q=1.0         → none   (no q-value parsing)
    Accept-Encoding: *                  → none   (no wildcard)
    Accept-Encoding: invalid-encoding   → none

=============================================================================
WHY CONTENT-LENGTH LIVES HERE
=============================================================================

Content-Length must describe the bytes actually sent. Only after the
compression decision is the final body known, so this is the one place
that can set it correctly. Handlers never set it themselves.

Unlike general-purpose compression middleware there is no minimum size and
no "only if smaller" check: a 3-byte echo still gets a ~23-byte gzip body
when the client asks for it.

=============================================================================
"""

import gzip

from .base import Middleware, NextHandler
from ..http.headers import HeaderLines
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


# zlib's own default; gzip.compress() would otherwise use 9
DEFAULT_LEVEL = 6


def accepts_gzip(headers: HeaderLines) -> bool:
    """
    Check whether the request's Accept-Encoding lists exactly "gzip".

    Args:
        headers: Raw request header lines.

    Returns:
        True if the first Accept-Encoding line contains the token "gzip".
    """
    value = headers.find("accept-encoding")
    if value is None:
        return False
    return any(token.strip() == "gzip" for token in value.split(","))


def encode_response(
    response: HTTPResponse,
    headers: HeaderLines,
    level: int = DEFAULT_LEVEL,
) -> HTTPResponse:
    """
    Apply content negotiation to a payload response, in place.

    Responses not marked compressible are returned untouched.

    Args:
        response: Response produced by a handler.
        headers: The request's header lines.
        level: gzip compression level (1-9).

    Returns:
        The same response object, for chaining.
    """
    if not response.compressible:
        return response

    if accepts_gzip(headers):
        response.body = gzip.compress(response.body, compresslevel=level)
        response.add_header("Content-Encoding", "gzip")

    response.add_header("Content-Length", str(len(response.body)))
    return response


class CompressionMiddleware(Middleware):
    """
    Response compression middleware.

    Must sit INSIDE any middleware that reports on the final body (e.g.
    LoggingMiddleware), i.e. be added after it:

        pipeline.add(LoggingMiddleware())
        pipeline.add(CompressionMiddleware())
    """

    def __init__(self, level: int = DEFAULT_LEVEL):
        """
        Args:
            level: Compression level (1-9).
                   1 = fastest, least compression
                   6 = balanced (default)
                   9 = slowest, best compression
        """
        if not 1 <= level <= 9:
            raise ValueError(f"Compression level must be 1-9, got {level}")
        self.level = level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = next(request)
        return encode_response(response, request.headers, self.level)
