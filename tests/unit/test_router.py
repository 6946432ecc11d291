"""
Unit tests for the router.
"""

import pytest

from minihttp.handlers import create_router
from minihttp.http.router import Router, Route, RouteMatch
from minihttp.http.request import HTTPRequest
from minihttp.http.response import HTTPResponse, ResponseBuilder
from minihttp.http.status_codes import HTTPStatus


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return ResponseBuilder().text(request.path_param).build()


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        route = router.add_route("/user-agent", dummy_handler, method="GET")

        assert router.routes == [route]
        assert route.path == "/user-agent"
        assert route.method == "GET"
        assert route.prefix is False
        assert route.name == "dummy_handler"

    def test_add_prefix_route(self):
        """Test that a trailing * registers a prefix route."""
        router = Router()
        route = router.add_route("/echo/*", dummy_handler)

        assert route.path == "/echo/"
        assert route.prefix is True
        assert route.pattern == "/echo/*"

    def test_match_exact_path(self):
        """Test that exact routes match only the exact path."""
        router = Router()
        router.add_route("/user-agent", dummy_handler)

        assert router.match("GET", "/user-agent") is not None
        assert router.match("GET", "/user-agent/") is None
        assert router.match("GET", "/user-agents") is None

    def test_match_prefix_captures_suffix(self):
        """Test that prefix routes capture the rest of the path."""
        router = Router()
        router.add_route("/echo/*", dummy_handler)

        match = router.match("GET", "/echo/abc/def")
        assert isinstance(match, RouteMatch)
        assert match.param == "abc/def"

        match = router.match("GET", "/echo/")
        assert match is not None
        assert match.param == ""

        assert router.match("GET", "/echo") is None

    def test_match_with_method(self):
        """Test method-based routing."""
        router = Router()
        router.add_route("/files/*", dummy_handler, method="GET")
        router.add_route("/files/*", dummy_handler, method="POST")

        assert router.match("GET", "/files/a").route.method == "GET"
        assert router.match("POST", "/files/a").route.method == "POST"
        assert router.match("PUT", "/files/a") is None

    def test_method_is_case_sensitive(self):
        router = Router()
        router.add_route("/", dummy_handler)

        assert router.match("get", "/") is None

    def test_first_match_wins(self):
        """Test that routes are tried in registration order."""
        def first(request):
            return ResponseBuilder().text("first").build()

        def second(request):
            return ResponseBuilder().text("second").build()

        router = Router()
        router.add_route("/echo/*", first)
        router.add_route("/echo/special", second)

        response = router.handle(make_request("GET", "/echo/special"))
        assert response.body == b"first"

    def test_resolve_fallbacks(self):
        """Test 404 for unmatched GET, 405 for anything else."""
        router = Router()
        router.add_route("/", dummy_handler)

        assert router.handle(make_request("GET", "/nope")).status == HTTPStatus.NOT_FOUND
        assert router.handle(make_request("POST", "/nope")).status == HTTPStatus.METHOD_NOT_ALLOWED
        assert router.handle(make_request("DELETE", "/")).status == HTTPStatus.METHOD_NOT_ALLOWED
        assert router.resolve("GET", "/nope").route is None

    def test_handle_injects_path_param(self):
        """Test that the handler sees the captured suffix."""
        router = Router()
        router.add_route("/echo/*", dummy_handler)

        original = make_request("GET", "/echo/xyz")
        response = router.handle(original)

        assert response.body == b"xyz"
        assert original.path_param == ""  # Original request untouched

    def test_decorators(self):
        """Test route registration decorators."""
        router = Router()

        @router.get("/")
        def index(request):
            return ResponseBuilder().build()

        @router.post("/files/*")
        def store(request):
            return ResponseBuilder().status(HTTPStatus.CREATED).build()

        assert [(r.method, r.pattern) for r in router.routes] == [
            ("GET", "/"),
            ("POST", "/files/*"),
        ]
        assert index.__name__ == "index"  # Returned unchanged


class TestRouteTable:
    """Tests for the server's route table."""

    @pytest.fixture
    def router(self, tmp_path) -> Router:
        return create_router(str(tmp_path))

    def test_registration_order(self, router: Router):
        assert [(r.method, r.pattern) for r in router.routes] == [
            ("GET", "/files/*"),
            ("POST", "/files/*"),
            ("GET", "/user-agent"),
            ("GET", "/echo/*"),
            ("GET", "/"),
        ]

    @pytest.mark.parametrize("method,path,name,param", [
        ("GET", "/files/a.txt", "file_get", "a.txt"),
        ("POST", "/files/a.txt", "file_post", "a.txt"),
        ("GET", "/user-agent", "user_agent", ""),
        ("GET", "/echo/hi", "echo", "hi"),
        ("GET", "/", "index", ""),
    ])
    def test_routes(self, router: Router, method, path, name, param):
        match = router.match(method, path)

        assert match.route.name == name
        assert match.param == param

    @pytest.mark.parametrize("method,path,status", [
        ("GET", "/unknown", HTTPStatus.NOT_FOUND),
        ("GET", "/echo", HTTPStatus.NOT_FOUND),
        ("POST", "/echo/x", HTTPStatus.METHOD_NOT_ALLOWED),
        ("POST", "/", HTTPStatus.METHOD_NOT_ALLOWED),
        ("PUT", "/files/a", HTTPStatus.METHOD_NOT_ALLOWED),
        ("DELETE", "/unknown", HTTPStatus.METHOD_NOT_ALLOWED),
    ])
    def test_fallbacks(self, router: Router, method, path, status):
        response = router.handle(make_request(method, path))

        assert response.status == status
        assert response.body == b""
        assert response.headers == []
