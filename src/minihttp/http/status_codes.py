"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server speaks a deliberately small vocabulary of status codes. Every
response it can produce falls into one of four outcomes:

    ┌──────┬──────────────────────┬──────────────────────────────────────┐
    │ Code │ Phrase               │ When                                 │
    ├──────┼──────────────────────┼──────────────────────────────────────┤
    │ 200  │ OK                   │ GET /, /echo/*, /user-agent, files   │
    │ 201  │ Created              │ POST /files/{name} stored the body   │
    │ 404  │ Not Found            │ Unknown GET path, missing file       │
    │ 405  │ Method Not Allowed   │ Any other method / POST elsewhere    │
    └──────┴──────────────────────┴──────────────────────────────────────┘

Anything that goes wrong outside these outcomes (a truncated request, a
disk error) does not get a status code at all: the connection is dropped.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK
        <HTTPStatus.OK: 200>
        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.OK.phrase
        'OK'
    """

    OK = 200                    # Request handled, body (if any) follows
    CREATED = 201               # File written from request body
    NOT_FOUND = 404             # No such route or file
    METHOD_NOT_ALLOWED = 405    # Method/path combination not served

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

        The reason phrase is the text that appears after the status code
        in an HTTP response line:

            HTTP/1.1 200 OK
                     ─── ──
                      │   │
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
}
