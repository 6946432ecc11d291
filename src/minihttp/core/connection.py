"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: buffered reading, writing, lifecycle
state and a proper close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

    Client sends:                      Server might receive:
        "GET / HTTP/1.1\r\n"               recv() → "GET / HT"
        "Host: x\r\n\r\n"                  recv() → "TP/1.1\r\nHost: x\r\n\r\n"

TCP only guarantees that bytes arrive IN ORDER and INTACT, not in the
chunks they were sent in. Instead of hand-rolling a buffer around recv(),
we wrap the socket in a buffered file object (socket.makefile("rb")):

    readline()  → blocks until a full line (or EOF) is available
    read(n)     → blocks until n bytes (or EOF) are available

which is exactly what line-oriented HTTP framing needs.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    ┌──────────┐   ┌─────────┐   ┌─────────────┐   ┌─────────┐   ┌────────┐
    │ ACCEPTED │──►│ READING │──►│ DISPATCHING │──►│ WRITING │──►│ CLOSED │
    └──────────┘   └────┬────┘   └──────┬──────┘   └────┬────┘   └────────┘
                        │               │               │
                        └───────────────┴───────────────┘
                                        │ any I/O or parse error
                                        ▼
                                   ┌────────┐
                                   │ FAILED │   (absorbing)
                                   └────────┘

Exactly one request is served per connection. There is no keep-alive
loop: after WRITING (or FAILED) the socket is closed.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid

from ..http.request import HTTPRequest, RequestReader


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states."""
    ACCEPTED = "accepted"        # Just accepted, nothing read yet
    READING = "reading"          # Reading the request off the socket
    DISPATCHING = "dispatching"  # Request parsed, handler is executing
    WRITING = "writing"          # Sending response bytes
    CLOSED = "closed"            # Response sent, socket released
    FAILED = "failed"            # Aborted by an error, socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Owned by exactly one worker thread for its whole life; nothing in here
    is shared, so nothing is locked.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)

    # Internal state (not shown in repr for cleaner logs)
    _reader: Optional[BinaryIO] = field(default=None, repr=False)
    _closed: bool = field(default=False, repr=False)

    def __post_init__(self):
        """
        Configure the socket after initialization.

        The listening socket polls accept() with a timeout, and on some
        platforms accepted sockets inherit it. Client sockets must block:
        a worker waits on its client for as long as the client takes.
        """
        self.socket.setblocking(True)
        self._reader = self.socket.makefile("rb")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def is_closed(self) -> bool:
        return self._closed

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self, reader: RequestReader) -> HTTPRequest:
        """
        Read the connection's single request.

        Raises:
            HTTPParseError: Malformed or truncated request.
            OSError: Socket failure while reading.
        """
        self.state = ConnectionState.READING
        return reader.read(self._reader, tuple(self.address[:2]))

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response data to the client.

        Uses sendall() so that ALL the data is sent; send() might only
        take part of it if the kernel buffer is full.

        Returns:
            True if the send succeeded, False if the connection was lost
            (the connection is then FAILED).
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            self.fail()
            return False

    def fail(self):
        """Move to the absorbing FAILED state."""
        self.state = ConnectionState.FAILED

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, telling the client we're done
        2. Drain whatever the client still sends, briefly, so the kernel
           does not answer unread data with an RST that could destroy
           the response in flight
        3. close() the reader and the socket

        A FAILED connection stays FAILED; otherwise it becomes CLOSED.
        """
        if self._closed:
            return
        self._closed = True

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout; we're closing anyway

        for closeable in (self._reader, self.socket):
            try:
                closeable.close()
            except OSError:
                pass

        if self.state != ConnectionState.FAILED:
            self.state = ConnectionState.CLOSED

        logger.debug(f"[{self.id}] Connection {self.state.value} after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with conn:
                request = conn.read_request(reader)
                conn.send_response(data)
            # Connection closed here, whatever happened
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.fail()
        self.close()
        return False  # Don't suppress exceptions
