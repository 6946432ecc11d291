"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to the handler that should answer it.

=============================================================================
MATCHING RULES
=============================================================================

Routes come in two shapes, both plain string tests (no regex):

    EXACT   "/user-agent"   path == "/user-agent"
    PREFIX  "/echo/*"       path.startswith("/echo/")
                            captured suffix = path[len("/echo/"):]

Routes are tried in REGISTRATION ORDER and the first match wins. The
method must match exactly (case-sensitive: "get" is not "GET").

When nothing matches, the router falls back on the method alone:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Router.resolve(method, path)                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   for route in routes (in order):                                    │
    │       method matches and path matches?  ──yes──► RouteMatch          │
    │                                                                      │
    │   no route matched:                                                  │
    │       method == "GET"   ──► 404 Not Found                            │
    │       anything else     ──► 405 Method Not Allowed                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

So "POST /echo/x" is a 405 (POST is only served under /files/), while
"GET /nowhere" is a 404.

The router itself performs no I/O. handle() just calls the handler it
resolved.

=============================================================================
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from .request import HTTPRequest
from .response import HTTPResponse, not_found, method_not_allowed


# Handler: A function that takes a request and returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]

PREFIX_MARKER = "*"


@dataclass(frozen=True)
class Route:
    """
    A registered route.

    Attributes:
        path:    Exact path, or a prefix when `prefix` is True
                 ("/files/" for a route registered as "/files/*").
        method:  HTTP method this route answers.
        handler: Function producing the response.
        prefix:  Whether `path` is matched as a prefix.
        name:    Optional label, used in logs.
    """

    path: str
    method: str
    handler: Handler
    prefix: bool = False
    name: Optional[str] = None

    def matches(self, method: str, path: str) -> bool:
        if method != self.method:
            return False
        if self.prefix:
            return path.startswith(self.path)
        return path == self.path

    @property
    def pattern(self) -> str:
        """The path as it was registered ("/files/*" or "/user-agent")."""
        return self.path + PREFIX_MARKER if self.prefix else self.path


@dataclass(frozen=True)
class RouteMatch:
    """
    Result of routing a request.

    Example:
        Route:   GET /echo/*
        Path:    /echo/abc
        Result:  RouteMatch(route=<Route>, handler=echo, param="abc")

    `route` is None for the built-in 404/405 fallbacks.
    """

    handler: Handler
    param: str = ""
    route: Optional[Route] = None


def _not_found(request: HTTPRequest) -> HTTPResponse:
    return not_found()


def _method_not_allowed(request: HTTPRequest) -> HTTPResponse:
    return method_not_allowed()


class Router:
    """
    Ordered, first-match-wins HTTP router.

    Usage:
        router = Router()

        @router.get("/echo/*")
        def echo(request):
            return ResponseBuilder().text(request.path_param).build()

        router.add_route("/files/*", files.post, method="POST")

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    @property
    def routes(self) -> List[Route]:
        """Registered routes in matching order."""
        return list(self._routes)

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: str = "GET",
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: Exact path ("/user-agent") or prefix ending in "*"
                  ("/files/*").
            handler: Function that takes a request and returns a response.
            method: HTTP method, matched case-sensitively.
            name: Optional route label.

        Returns:
            The registered Route.
        """
        prefix = path.endswith(PREFIX_MARKER)
        if prefix:
            path = path[:-len(PREFIX_MARKER)]

        route = Route(
            path=path,
            method=method,
            handler=handler,
            prefix=prefix,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        return route

    def route(
        self,
        path: str,
        method: str = "GET",
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

        Usage:
            @router.route("/files/*", method="POST")
            def store(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler  # Return handler unchanged (allows stacking decorators)
        return decorator

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET", name)

    def post(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST", name)

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first registered route for (method, path).

        Returns:
            RouteMatch if a route matched, None otherwise.
        """
        for route in self._routes:
            if route.matches(method, path):
                param = path[len(route.path):] if route.prefix else ""
                return RouteMatch(handler=route.handler, param=param, route=route)
        return None

    def resolve(self, method: str, path: str) -> RouteMatch:
        """
        Like match(), but always returns a RouteMatch.

        Unmatched GETs resolve to the 404 handler, every other unmatched
        method to the 405 handler.
        """
        match = self.match(method, path)
        if match is not None:
            return match
        if method == "GET":
            return RouteMatch(handler=_not_found)
        return RouteMatch(handler=_method_not_allowed)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and run its handler.

        The handler receives a copy of the request with `path_param` set to
        the suffix captured by a prefix route.
        """
        match = self.resolve(request.method, request.path)
        if match.param:
            request = replace(request, path_param=match.param)
        return match.handler(request)
