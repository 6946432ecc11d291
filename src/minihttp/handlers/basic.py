"""
Handlers for the non-file routes: /, /echo/{text} and /user-agent.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, ok


def index(request: HTTPRequest) -> HTTPResponse:
    """GET / → 200 with no headers and no body."""
    return ok()


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    GET /echo/{text} → 200 text/plain with {text} as the body.

    The text is sent back byte for byte as it appeared in the request
    target: "/echo/a%20b" answers "a%20b", not "a b".
    """
    return ResponseBuilder().text(request.path_param).build()


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    GET /user-agent → 200 text/plain with the User-Agent header value.

    Missing header → empty body (still 200).
    """
    return ResponseBuilder().text(request.user_agent).build()
