"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted client is
wrapped in a Connection and handed to a callback; what happens next (one
thread per connection) is the HTTP server's business.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(handler)                                                    │
    │        ├──► _create_socket()   socket() + SO_REUSEADDR + TCP_NODELAY │
    │        ├──► bind()             host:port (port 0 = OS picks)         │
    │        ├──► listen()           backlog                               │
    │        ├──► _setup_signals()   SIGINT/SIGTERM → shutdown()           │
    │        └──► _accept_loop()     BLOCKS until shutdown()               │
    │                 └──► accept() → Connection → handler(conn)           │
    │                                                                      │
    │    shutdown()        _running = False (loop notices within 1s)       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A failed accept() is logged and the loop carries on: one bad client must
never take the listener down. Only shutdown() ends the loop.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    # How often the accept loop wakes up to check for shutdown
    ACCEPT_POLL_INTERVAL = 1.0

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening; tests wait on it
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The address actually bound (IP, port).

        Differs from the configured one when port 0 was requested.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: Avoids "Address already in use" when restarting
        # while old connections sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # TCP_NODELAY: Disable Nagle's algorithm, send responses immediately
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # Timeout on accept() so the loop can notice shutdown():
        #   while running:
        #       try: accept()        # Blocks for 1 second max
        #       except timeout: continue
        sock.settimeout(self.ACCEPT_POLL_INTERVAL)

        return sock

    def _setup_signals(self):
        """
        Setup SIGTERM/SIGINT handlers for graceful shutdown.

        Python only allows installing signal handlers from the main thread.
        When the server runs on another thread (embedded, or in tests) the
        caller is responsible for calling shutdown().
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Start accepting connections.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each new Connection, on the
                                accept thread. It must return quickly.

        Raises:
            OSError: If the socket cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Main loop for accepting connections.

        ┌─────────────────────────────────────────────────────────────────┐
        │   while self._running:                                           │
        │       accept()          → (client_socket, client_address)        │
        │       Connection(...)   → wrap the client socket                 │
        │       handler(conn)     → HTTPServer starts a worker thread      │
        └─────────────────────────────────────────────────────────────────┘
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Normal: lets us re-check self._running
                continue
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown
                logger.error(f"Accept error: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            try:
                conn = Connection(socket=client_socket, address=client_address)
                connection_handler(conn)
            except Exception:
                logger.exception(f"Failed to hand off connection from {client_address[0]}")
                client_socket.close()

    def shutdown(self):
        """
        Initiate graceful shutdown.

        Safe to call from a signal handler or any thread, any number of
        times. The accept loop exits within ACCEPT_POLL_INTERVAL seconds.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the listening socket to be up.

        Returns:
            True if the server is listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
