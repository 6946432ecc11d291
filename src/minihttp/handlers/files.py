"""
=============================================================================
FILE STORAGE HANDLER
=============================================================================

Stores and serves files from one configured directory.

    GET  /files/{name}   → 200 application/octet-stream, file contents
                           404 if there is no such file
    POST /files/{name}   → 201, request body written to {name}

=============================================================================
FLOW
=============================================================================

    Request: GET /files/report.bin

    1. Take the route suffix ("report.bin") as the file name
    2. Join it to the storage directory
    3. Security check: does the resolved path stay inside the directory?
    4. Open and read in ONE step - a missing file is a 404

There is no exists() check before open(). Checking first and
opening second is racy: another thread can delete the file in between.
Opening directly and catching FileNotFoundError answers the same question
atomically.

=============================================================================
CONCURRENCY
=============================================================================

Nothing here is locked. Two requests for the same name (a GET racing a
POST) may observe a partially written file. The handler holds no state
besides the directory, which never changes after construction, so it is
safe to share one instance between all connection threads.

=============================================================================
"""

import errno
import logging
from pathlib import Path
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, created, not_found


logger = logging.getLogger(__name__)


class FileHandler:
    """
    Handler pair for GET/POST /files/{name}.

    Usage:
        files = FileHandler("/var/data")
        router.add_route("/files/*", files.get, method="GET")
        router.add_route("/files/*", files.post, method="POST")
    """

    def __init__(self, directory: str):
        """
        Args:
            directory: Storage directory. Every served or stored file must
                       resolve to a path inside it.
        """
        self.directory = Path(directory)
        # Resolve to absolute path once; used for the containment check
        self._root = self.directory.resolve()

    def resolve(self, filename: str) -> Optional[Path]:
        """
        Map a client-supplied file name to a path in the directory.

        resolve() follows symlinks and collapses ".." components, so
        "../../etc/passwd", "/etc/passwd" and a symlink pointing outside
        the directory all end up outside the root and are refused.

        Returns:
            The path to use, or None if it would escape the directory.
        """
        path = self.directory / filename
        try:
            path.resolve().relative_to(self._root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {filename!r}")
            return None
        return path

    def get(self, request: HTTPRequest) -> HTTPResponse:
        """
        Serve a stored file.

        Raises:
            OSError: If the file exists but cannot be read (permissions,
                     I/O error). The connection supervisor aborts the
                     connection without a response.
        """
        path = self.resolve(request.path_param)
        if path is None:
            return not_found()

        try:
            with open(path, "rb") as f:
                content = f.read()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            return not_found()
        except OSError as e:
            # A name the filesystem cannot even hold names no file
            if e.errno == errno.ENAMETOOLONG:
                return not_found()
            raise

        return ResponseBuilder().binary(content).build()

    def post(self, request: HTTPRequest) -> HTTPResponse:
        """
        Store the request body, replacing any existing file.

        Raises:
            OSError: If the file cannot be created or fully written. There
                     is no rollback; whatever reached the disk stays.
        """
        path = self.resolve(request.path_param)
        if path is None:
            return not_found()

        with open(path, "wb") as f:
            f.write(request.body)

        logger.debug(f"Stored {len(request.body)} bytes in {path}")
        return created()
