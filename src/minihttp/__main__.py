"""
=============================================================================
MINIHTTP CLI ENTRY POINT
=============================================================================

    # Serve the current directory on 127.0.0.1:4221
    python -m minihttp

    # Store and serve files from /tmp/files
    python -m minihttp --directory /tmp/files

    # Listen on all interfaces, JSON access log
    python -m minihttp --host 0.0.0.0 --log-format json

Defaults come from the environment (HTTP_HOST, HTTP_PORT, HTTP_DIRECTORY,
HTTP_LOG_LEVEL, HTTP_LOG_FORMAT); command-line flags override them.

A --directory that does not exist is reported and the server falls back
to serving the current directory.

=============================================================================
"""

import argparse
import os
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .config import ServerConfig, LOG_LEVELS, LOG_FORMATS
from .server import HTTPServer


DEFAULT_DIRECTORY = "."


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal thread-per-connection HTTP/1.1 server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                          # Serve . on 127.0.0.1:4221
  python -m minihttp --directory /tmp/files   # Store files in /tmp/files
  python -m minihttp --port 8080 -l DEBUG     # Custom port, verbose logs
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # STORAGE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help=f"Directory for GET/POST /files/{{name}} (default: {defaults.directory})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def config_from_args(argv: Optional[List[str]] = None) -> ServerConfig:
    """
    Build the server configuration from the environment and argv.

    Raises:
        ValueError: If the environment holds an unparsable value.
    """
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)

    directory = args.directory
    if not os.path.isdir(directory):
        print(
            f"Directory {directory!r} does not exist, using {DEFAULT_DIRECTORY!r}",
            file=sys.stderr,
        )
        directory = DEFAULT_DIRECTORY

    return replace(
        defaults,
        host=args.host,
        port=args.port,
        directory=directory,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    try:
        config = config_from_args(argv)
        server = HTTPServer(config)
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
