"""
=============================================================================
HTTP REQUEST READER
=============================================================================

Reads one HTTP/1.1 request from a buffered byte stream and turns it into an
immutable HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    POST /files/notes.txt HTTP/1.1\r\n                          │ │
    │  │    ─┬── ────────┬─────── ────┬───                              │ │
    │  │   Method       Path      Version (ignored)                     │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:4221\r\n                                    │ │
    │  │    Content-Length: 5\r\n                                       │ │
    │  │    \r\n                 ← Empty line ends the headers          │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    hello                ← Exactly Content-Length bytes         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PERMISSIVE VS STRICT
=============================================================================

The reader is permissive about CONTENT and strict about FRAMING:

    PERMISSIVE:
    - "GET" alone is a valid request line (path becomes "")
    - Header lines are stored verbatim, no name validation
    - A missing or garbage Content-Length means "no body"

    STRICT (raises HTTPParseError):
    - Stream ends before the request line or before the blank line
    - Stream ends before Content-Length body bytes arrived
    - A line is not valid UTF-8, or is longer than max_line_size

A framing error means we cannot know where the request ends, so there is
nothing sensible to answer: the connection is simply dropped.

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import BinaryIO, Tuple

from .headers import HeaderLines


# Upper bound on a single body read()
BODY_CHUNK_SIZE = 64 * 1024


class HTTPParseError(Exception):
    """
    Raised when a request cannot be read off the stream.

    Unlike routing misses (which produce 404/405 responses), a parse error
    never produces a response. The connection supervisor logs it and
    closes the socket.
    """


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Frozen: once the reader has built it, nothing downstream can change it.
    The router hands handlers a copy carrying the captured path suffix
    (see Router.handle) instead of mutating this one.

    Attributes:
        method:         Request method exactly as sent ("GET", "POST", ...).
        path:           Request target exactly as sent, no decoding.
        headers:        Raw header lines in arrival order.
        body:           Body bytes, exactly Content-Length long.
        client_address: (ip, port) of the peer, for logging.
        path_param:     Suffix captured by the matched route
                        ("/echo/abc" → "abc"), empty otherwise.
    """

    method: str
    path: str
    headers: HeaderLines = field(default_factory=HeaderLines)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)
    path_param: str = ""

    @property
    def content_length(self) -> int:
        """
        Declared body length, or 0 when absent or unparsable.

        The first "Content-Length:" line is split on whitespace and its
        SECOND token is read as a non-negative decimal integer:

            "Content-Length: 42"     → 42
            "content-length:   7 "   → 7
            "Content-Length: +5"     → 5   (one leading plus sign allowed)
            "Content-Length:42"      → 0   (no second token)
            "Content-Length: -1"     → 0   (not a non-negative integer)
        """
        line = self.headers.first_line("content-length")
        if line is None:
            return 0
        tokens = line.split()
        if len(tokens) < 2:
            return 0
        token = tokens[1]
        if token.startswith("+"):
            token = token[1:]
        if not (token.isascii() and token.isdigit()):
            return 0
        return int(token)

    @property
    def user_agent(self) -> str:
        """Value of the User-Agent header, stripped, or ""."""
        return self.headers.get("user-agent")


class RequestReader:
    """
    Reads HTTPRequest objects from a buffered binary stream.

    The stream is anything with readline() and read(): in the server it is
    socket.makefile("rb"); in tests it is usually io.BytesIO.

    ==========================================================================
    READING ALGORITHM
    ==========================================================================

        1. readline()           → request line → (method, path)
        2. readline() until ""  → header lines
        3. Content-Length       → L
        4. read(L)              → body (must be exactly L bytes)

    Nothing is read past the body: the reader never consumes bytes that
    belong to whatever the client sends next.

    ==========================================================================
    """

    def __init__(self, max_line_size: int = 64 * 1024):
        """
        Args:
            max_line_size: Longest accepted request or header line in
                           bytes, terminator included. Guards against a
                           client streaming an endless line at us.
        """
        self.max_line_size = max_line_size

    def read(
        self,
        stream: BinaryIO,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Read one complete request from the stream.

        Args:
            stream: Buffered binary source positioned at a request.
            client_address: Peer (ip, port) recorded on the request.

        Returns:
            The parsed HTTPRequest.

        Raises:
            HTTPParseError: On any framing problem (see module docstring).
            OSError: If the underlying socket read fails.
        """
        # =====================================================================
        # STEP 1: Request line
        # =====================================================================
        # Whitespace split, missing tokens become "". The version token
        # (and anything after it) is ignored.
        request_line = self._read_line(stream, "request line")
        parts = request_line.split()
        method = parts[0] if len(parts) > 0 else ""
        path = parts[1] if len(parts) > 1 else ""

        # =====================================================================
        # STEP 2: Header lines up to the blank line
        # =====================================================================
        lines = []
        while True:
            line = self._read_line(stream, "headers")
            if not line.strip():
                break
            lines.append(line)

        request = HTTPRequest(
            method=method,
            path=path,
            headers=HeaderLines(lines),
            client_address=client_address,
        )

        # =====================================================================
        # STEP 3: Body, exactly Content-Length bytes
        # =====================================================================
        length = request.content_length
        if length > 0:
            request = replace(request, body=self._read_body(stream, length))

        return request

    def _read_body(self, stream: BinaryIO, length: int) -> bytes:
        """
        Read exactly `length` body bytes, BODY_CHUNK_SIZE at a time.

        The declared length is only a claim: reading it in one read(length)
        would allocate that much up front. Reading in chunks, memory grows
        only with the bytes that actually arrive.

        Raises:
            HTTPParseError: If the stream ends before `length` bytes.
        """
        chunks = []
        received = 0
        while received < length:
            chunk = stream.read(min(BODY_CHUNK_SIZE, length - received))
            if not chunk:
                raise HTTPParseError(
                    f"Incomplete body: expected {length} bytes, got {received}"
                )
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)

    def _read_line(self, stream: BinaryIO, where: str) -> str:
        """
        Read one CRLF-terminated line and return it without the terminator.

        Raises:
            HTTPParseError: If the stream ended first, the line is too long,
                            or it is not valid UTF-8.
        """
        raw = stream.readline(self.max_line_size + 1)
        if not raw:
            raise HTTPParseError(f"Connection closed while reading {where}")
        if len(raw) > self.max_line_size:
            raise HTTPParseError(
                f"Line in {where} exceeds {self.max_line_size} bytes"
            )
        if not raw.endswith(b"\n"):
            raise HTTPParseError(f"Truncated line in {where}")
        try:
            return raw.decode("utf-8").rstrip("\r\n")
        except UnicodeDecodeError as e:
            raise HTTPParseError(f"Invalid UTF-8 in {where}: {e}") from e


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def read_request(
    stream: BinaryIO,
    client_address: Tuple[str, int] = ("", 0),
    max_line_size: int = 64 * 1024,
) -> HTTPRequest:
    """
    Read one request from `stream` with a throwaway RequestReader.

    Use RequestReader directly when reading many requests with the same
    settings.
    """
    return RequestReader(max_line_size=max_line_size).read(stream, client_address)
