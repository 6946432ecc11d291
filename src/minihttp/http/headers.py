"""
=============================================================================
HEADER LINES
=============================================================================

Request headers are kept exactly as they arrived: an ordered sequence of
raw "Key: Value" lines. We never build a dictionary out of them.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      HeaderLines lookup                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   lines (arrival order)          find("User-Agent")                  │
    │   ──────────────────────          ────────────────────               │
    │   "Host: localhost:4221"          lowercase each line, test         │
    │   "user-agent: curl/8.4"   ◄────  startswith("user-agent:")         │
    │   "User-Agent: other"             first hit wins → " curl/8.4"      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

HTTP header names are case-insensitive (RFC 7230), so the match is done on
a lowercased copy of each line. The match is a literal PREFIX test on
"name:" - a line is only considered if the colon follows the name
immediately. Only the FIRST matching line counts; later duplicates are
ignored.

The value returned is everything after the colon, untouched. Callers
decide how to interpret it (strip it, split it on whitespace, split it on
commas...).

=============================================================================
"""

from typing import Iterable, Iterator, Optional, Tuple


class HeaderLines:
    """
    Immutable, ordered collection of raw request header lines.

    Example:
        headers = HeaderLines(["Host: example.com", "Accept-Encoding: gzip"])
        headers.find("accept-encoding")   # " gzip"
        headers.find("Content-Length")    # None
        "host" in headers                 # True
    """

    __slots__ = ("_lines",)

    def __init__(self, lines: Iterable[str] = ()):
        self._lines: Tuple[str, ...] = tuple(lines)

    def first_line(self, name: str) -> Optional[str]:
        """
        Find the first complete header line named `name`.

        Args:
            name: Header name, any case, without the trailing colon.

        Returns:
            The whole line as received, or None if no line matches.
        """
        prefix = name.lower() + ":"
        for line in self._lines:
            if line.lower().startswith(prefix):
                return line
        return None

    def find(self, name: str) -> Optional[str]:
        """
        Find the raw value of the first header line named `name`.

        Returns:
            The text after "name:" on the first matching line (not
            stripped), or None if no line matches.
        """
        line = self.first_line(name)
        if line is None:
            return None
        return line[len(name) + 1:]

    def get(self, name: str, default: str = "") -> str:
        """Get the stripped value of header `name`, or `default`."""
        value = self.find(name)
        return default if value is None else value.strip()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderLines):
            return self._lines == other._lines
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._lines)

    def __repr__(self) -> str:
        return f"HeaderLines({list(self._lines)!r})"
