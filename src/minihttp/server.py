"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the components together: socket server, request reader, middleware
pipeline and router.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │  accept thread            worker thread (one per connection)         │
    │  ─────────────            ─────────────────────────────────          │
    │                                                                      │
    │  SocketServer             _process_connection(conn)                  │
    │    accept()                 │                                        │
    │    Connection(...)          ├──► conn.read_request()   READING       │
    │    _handle_connection ────► │        RequestReader                   │
    │      Thread(...).start()    ├──► handler(request)      DISPATCHING   │
    │    accept() ...             │        LoggingMiddleware               │
    │                             │          CompressionMiddleware         │
    │                             │            Router.handle               │
    │                             ├──► conn.send_response()  WRITING       │
    │                             └──► conn.close()          CLOSED        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Exactly one request per connection. There is no keep-alive and no pool:
the accept loop never waits on a request, and every worker owns its
connection from the first byte to close().

=============================================================================
FAILURES
=============================================================================

    Malformed / truncated request   WARNING, connection aborted, no response
    Handler raised (e.g. OSError)   ERROR + traceback, aborted, no response
    Client went away mid-send       WARNING, connection dropped

A failed connection never affects the others or the accept loop.

=============================================================================
"""

import logging
import threading
from typing import Optional, Callable, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .handlers import create_router
from .http import HTTPRequest, HTTPResponse, HTTPParseError, RequestReader, Router
from .middleware import MiddlewarePipeline, LoggingMiddleware, CompressionMiddleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Thread-per-connection HTTP/1.1 server.

    Usage:
        server = HTTPServer(ServerConfig(directory="/tmp/files"))
        server.run()  # Blocks until SIGINT/SIGTERM or shutdown()

    Embedding (tests):
        server = HTTPServer(ServerConfig(port=0))
        threading.Thread(target=server.run, daemon=True).start()
        server.wait_until_ready(5)
        host, port = server.address
    """

    def __init__(self, config: Optional[ServerConfig] = None, router: Optional[Router] = None):
        """
        Initialize the HTTP server.

        Args:
            config: Server configuration. Uses defaults if not provided.
            router: Custom router. Defaults to the standard routes serving
                    config.directory.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._reader = RequestReader(max_line_size=self.config.max_line_size)
        self._router = router or create_router(self.config.directory)

        # Logging first so it records what actually goes on the wire
        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))
        self._middleware.add(CompressionMiddleware())

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port); meaningful once the server is ready."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Returns after shutdown() or SIGINT/SIGTERM.

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        self._setup_logging()

        self._handler = self._middleware.wrap(self._router.handle)
        self._running = True

        logger.info(f"Starting {self.config.server_name}, serving files from {self.config.directory}")
        for route in self._router.routes:
            logger.debug(f"Route {route.method:<5} {route.pattern} -> {route.name}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight workers finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening. False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Hand a fresh connection to its own worker thread.

        Runs on the accept thread, so it only starts the thread.
        Daemon threads do not keep the process alive after shutdown.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Serve the connection's single request (runs on the worker thread).

        READING → DISPATCHING → WRITING → CLOSED, or FAILED from any of
        them. Nothing is retried, and close() always runs.
        """
        with conn:
            # ─────────────────────────────────────────────────────────────
            # READ
            # ─────────────────────────────────────────────────────────────
            try:
                request = conn.read_request(self._reader)
            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                conn.fail()
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                conn.fail()
                return

            # ─────────────────────────────────────────────────────────────
            # DISPATCH
            # ─────────────────────────────────────────────────────────────
            conn.state = ConnectionState.DISPATCHING
            try:
                response = self._handler(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error for {request.method} {request.path}: {e}")
                conn.fail()
                return

            # ─────────────────────────────────────────────────────────────
            # WRITE
            # ─────────────────────────────────────────────────────────────
            conn.send_response(response.to_bytes())


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create an HTTP server application.

    Example:
        app = create_app(ServerConfig(port=8080, directory="/srv/files"))
        app.run()
    """
    return HTTPServer(config)
