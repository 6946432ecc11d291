"""
=============================================================================
MINIHTTP - A Small Thread-Per-Connection HTTP/1.1 Server
=============================================================================

Raw sockets, one worker thread per accepted connection, one request per
connection. It echoes, reports the caller's User-Agent, and stores and
serves files from a single directory, gzip-encoding payloads for clients
that ask for it.

=============================================================================
ROUTES
=============================================================================

    GET  /                 200, empty
    GET  /echo/{text}      200, text/plain, body = text
    GET  /user-agent       200, text/plain, body = User-Agent header
    GET  /files/{name}     200, application/octet-stream, or 404
    POST /files/{name}     201, body stored as {name}
    any other GET          404
    any other method       405

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: accept → thread → request → response
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # Listening socket and accept loop
    │   └── connection.py    # One client socket and its lifecycle
    ├── http/
    │   ├── headers.py       # Case-insensitive header line lookup
    │   ├── request.py       # Request reading and parsing
    │   ├── response.py      # Response building and serialization
    │   ├── router.py        # Ordered (method, path) routing
    │   └── status_codes.py  # The four status codes in use
    ├── middleware/
    │   ├── base.py          # Middleware base class and pipeline
    │   ├── logging.py       # Access log
    │   └── compression.py   # gzip content negotiation
    └── handlers/
        ├── basic.py         # /, /echo, /user-agent
        └── files.py         # /files/{name}

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=4221, directory="/tmp/files"))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
