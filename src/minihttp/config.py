"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables live in one frozen dataclass, built once at startup and
never modified afterwards.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Who reads what                                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer     host, port, backlog                               │
    │   RequestReader    max_line_size                                     │
    │   FileHandler      directory                                         │
    │   HTTPServer       log_level, log_format, server_name                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Because it is frozen, the config can be handed to every connection thread
without any locking: nobody can change it under them.

=============================================================================
"""

import os
from dataclasses import dataclass


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(directory="/tmp/files", log_level="DEBUG")

    Tests:
        ServerConfig(port=0)   # Let the OS pick a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """The IP address to bind to."""

    port: int = 4221
    """The port number to listen on. 0 = any free port."""

    backlog: int = 128
    """
    Maximum number of queued connections.
    When the accept queue is full, new connections are refused.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    max_line_size: int = 64 * 1024
    """Longest accepted request/header line in bytes."""

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORAGE
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "."
    """Directory served and written by /files/{name}."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "minihttp/1.0"
    """Shown in the startup log line. Never sent to clients."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 4221)
        HTTP_DIRECTORY   File storage directory (default: .)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        HTTP_LOG_FORMAT  Access log format (default: text)

        Usage:
            HTTP_PORT=8080 HTTP_DIRECTORY=/tmp python -m minihttp
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY", "."),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction so mistakes surface at startup,
        not on the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.max_line_size < 256:
            raise ValueError("max_line_size must be >= 256")

        if not os.path.isdir(self.directory):
            raise ValueError(f"Not a directory: {self.directory}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.log_format}")
