"""
=============================================================================
HTTP RESPONSE BUILDER & WRITER
=============================================================================

Builds HTTP/1.1 responses and serializes them to wire bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  │    ────┬─── ─┬─ ─┬─                                            │ │
    │  │    Version  Code Phrase                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS (insertion order) ────────────────────────────────────┐ │
    │  │    Content-Type: text/plain\r\n        ← set by the handler    │ │
    │  │    Content-Encoding: gzip\r\n          ← set by the encoder    │ │
    │  │    Content-Length: 23\r\n              ← set by the encoder    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │    \r\n                                   ← Empty line             │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    <raw bytes, already encoded>                                │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT THE WRITER DOES NOT DO
=============================================================================

to_bytes() writes exactly what the response holds. It does NOT add Date,
Server or Content-Length on its own. Empty responses therefore go out as
a bare status line:

    GET /            →  b"HTTP/1.1 200 OK\r\n\r\n"
    GET /nope        →  b"HTTP/1.1 404 Not Found\r\n\r\n"

Payload responses get their Content-Length from the content encoder
(middleware/compression.py), which is the only component that knows the
final (possibly compressed) body size.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Headers are an ordered list of (name, value) pairs rather than a dict:
    the order they were added in is the order they are written in.

    Attributes:
        status:       Status code (one of the HTTPStatus values).
        headers:      Ordered (name, value) pairs.
        body:         Body bytes.
        compressible: True for payload responses (echo, user-agent, file
                      contents) that take part in Accept-Encoding
                      negotiation. Empty fixed-status responses leave it
                      False.
        version:      HTTP version for the status line.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    compressible: bool = False
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def add_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Append a header after the existing ones.

        Returns self for method chaining:
            response.add_header("Content-Encoding", "gzip").add_header(...)
        """
        self.headers.append((name, value))
        return self

    def get_header(self, name: str) -> Optional[str]:
        """Value of the first header called `name` (any case), or None."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def has_header(self, name: str) -> bool:
        """Check whether a header called `name` (any case) is present."""
        return self.get_header(name) is not None

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for socket.sendall().

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\r\n            ← Status line
            Content-Type: text/plain\r\n   ← Each header, in order
            Content-Length: 3\r\n
            \r\n                           ← Empty line (separator)
            abc                            ← Body bytes, as-is

        =====================================================================
        """
        lines = [self.status_line]
        for name, value in self.headers:
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Each method returns `self`, enabling chaining:

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .text("hello")
            .build())

    text() and binary() mark the response as compressible: they are the
    payload-carrying responses that the content encoder negotiates.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: List[Tuple[str, str]] = []
        self._body: bytes = b""
        self._compressible = False

    # =========================================================================
    # STATUS / HEADERS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Append a single response header."""
        self._headers.append((name, value))
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Append the Content-Type header."""
        return self.header("Content-Type", content_type)

    # =========================================================================
    # BODY METHODS
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body (raw bytes or string).

        Strings are encoded to UTF-8. The response is NOT marked
        compressible; prefer text() or binary() for payloads.
        """
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """
        Set a plain text payload.

        Content-Type is plain "text/plain" without a charset parameter; the
        body is the UTF-8 encoding of `text`.
        """
        self.body(text)
        self._compressible = True
        return self.content_type("text/plain")

    def binary(self, content: bytes) -> "ResponseBuilder":
        """Set an opaque binary payload (application/octet-stream)."""
        self.body(content)
        self._compressible = True
        return self.content_type("application/octet-stream")

    def build(self) -> HTTPResponse:
        """Build the final HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            headers=list(self._headers),
            body=self._body,
            compressible=self._compressible,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# The fixed-status responses carry no headers and no body.
#

def ok() -> HTTPResponse:
    """200 OK with no headers and an empty body."""
    return HTTPResponse(status=HTTPStatus.OK)


def created() -> HTTPResponse:
    """201 Created with no headers and an empty body."""
    return HTTPResponse(status=HTTPStatus.CREATED)


def not_found() -> HTTPResponse:
    """404 Not Found with no headers and an empty body."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)


def method_not_allowed() -> HTTPResponse:
    """405 Method Not Allowed with no headers and an empty body."""
    return HTTPResponse(status=HTTPStatus.METHOD_NOT_ALLOWED)
