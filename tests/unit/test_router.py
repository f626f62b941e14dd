"""
Unit tests for handlers and the router.
"""

import pytest

from tinyhttp.http.message import HTTPMethod, HTTPStatus, HTTPVersion
from tinyhttp.http.request import HTTPRequest
from tinyhttp.http.response import HTTPResponse, ok
from tinyhttp.http.router import FunctionHandler, Handler, Route, Router, as_handler


def make_request(method: str, path: str, version: str = "HTTP/1.1") -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path, version=version)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return ok(request.path)


class CountingHandler(Handler):
    """Handler subclass that records what it saw."""

    def __init__(self):
        self.seen = []

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        self.seen.append(request.path)
        return ok()


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        route = router.add_route(HTTPMethod.GET, "/users", dummy_handler)

        assert router.routes() == [route]
        assert route.path == "/users"
        assert route.method is HTTPMethod.GET
        assert isinstance(route.handler, FunctionHandler)

    def test_add_route_method_token(self):
        """Method may be given as its token."""
        router = Router()
        route = router.add_route("POST", "/users", dummy_handler)

        assert route.method is HTTPMethod.POST

    def test_add_route_unknown_method(self):
        router = Router()

        with pytest.raises(ValueError):
            router.add_route("PUT", "/users", dummy_handler)

    def test_match_exact(self):
        """Test matching exact paths."""
        router = Router()
        router.add_route(HTTPMethod.GET, "/users", dummy_handler)
        router.add_route(HTTPMethod.GET, "/posts", dummy_handler)

        assert router.match(HTTPMethod.GET, "/users").path == "/users"
        assert router.match(HTTPMethod.GET, "/posts").path == "/posts"

    @pytest.mark.parametrize("path", ["/ok/", "/OK", "/ok?x=1", "/o", "/okay", ""])
    def test_match_is_exact_and_case_sensitive(self, path):
        """Near misses do not match."""
        router = Router()
        router.add_route(HTTPMethod.GET, "/ok", dummy_handler)

        assert router.match(HTTPMethod.GET, path) is None

    def test_match_with_method(self):
        """Test method-based routing."""
        router = Router()
        router.add_route(HTTPMethod.GET, "/users", dummy_handler)

        assert router.match(HTTPMethod.POST, "/users") is None

    def test_first_match_wins(self):
        """Rules are scanned in registration order."""
        router = Router()
        first = router.add_route(HTTPMethod.GET, "/dup", dummy_handler)
        router.add_route(HTTPMethod.GET, "/dup", dummy_handler)

        assert router.match(HTTPMethod.GET, "/dup") is first

    def test_handle_success(self):
        """Test handling a request successfully."""
        router = Router()

        @router.get("/hello")
        def hello(request):
            return ok("Hello!")

        response = router.handle(make_request("GET", "/hello"))

        assert response.status == HTTPStatus.OK
        assert response.body == b"Hello!"

    def test_handle_not_found(self):
        """Unmatched requests get an empty 404."""
        router = Router()
        router.add_route(HTTPMethod.GET, "/users", dummy_handler)

        response = router.handle(make_request("GET", "/posts"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.version is HTTPVersion.HTTP_1_1
        assert len(response.headers) == 0
        assert response.body == b""

    @pytest.mark.parametrize("version", ["HTTP/1.0", "HTTP/1.1"])
    def test_wrong_method_is_not_found(self, version):
        """GET /ok does not serve POST /ok; the 404 is empty and keeps the version."""
        router = Router()
        router.add_route(HTTPMethod.GET, "/ok", dummy_handler)

        response = router.handle(make_request("POST", "/ok", version=version))

        assert response.status is HTTPStatus.NOT_FOUND
        assert response.version is HTTPVersion(version)
        assert len(response.headers) == 0
        assert response.body == b""

    def test_not_found_mirrors_version(self):
        """The 404 carries the request's version."""
        response = Router().handle(make_request("GET", "/", version="HTTP/1.0"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.version is HTTPVersion.HTTP_1_0

    def test_handler_exception_propagates(self):
        """Handler failures are not swallowed by the router."""
        router = Router()

        @router.get("/boom")
        def boom(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            router.handle(make_request("GET", "/boom"))

    def test_handler_sees_request(self):
        """The same request object reaches the handler."""
        router = Router()
        handler = CountingHandler()
        router.add_route(HTTPMethod.GET, "/count", handler)

        router.handle(make_request("GET", "/count"))
        router(make_request("GET", "/count"))

        assert handler.seen == ["/count", "/count"]

    def test_nested_router(self):
        """A Router can be the handler of another router's rule."""
        inner = Router()
        inner.add_route(HTTPMethod.GET, "/inner", dummy_handler)
        outer = Router()
        outer.add_route(HTTPMethod.GET, "/inner", inner)

        assert outer.handle(make_request("GET", "/inner")).body == b"/inner"


class TestRouterFreeze:
    """Tests for freezing the rule set."""

    def test_add_after_freeze(self):
        router = Router()
        router.freeze()

        assert router.frozen
        with pytest.raises(RuntimeError):
            router.add_route(HTTPMethod.GET, "/late", dummy_handler)

    def test_dispatch_after_freeze(self):
        router = Router()
        router.add_route(HTTPMethod.GET, "/ok", dummy_handler)
        router.freeze()

        assert router.handle(make_request("GET", "/ok")).status == HTTPStatus.OK

    def test_routes_is_a_copy(self):
        router = Router()
        router.routes().append("junk")

        assert router.routes() == []


class TestRouterDecorators:
    """Tests for decorator-style route registration."""

    def test_get_decorator(self):
        """Test @router.get decorator."""
        router = Router()

        @router.get("/test")
        def test_handler(request):
            return ok("test")

        assert router.routes()[0].method is HTTPMethod.GET

    def test_post_decorator(self):
        """Test @router.post decorator."""
        router = Router()

        @router.post("/test")
        def test_handler(request):
            return ok("test")

        assert router.routes()[0].method is HTTPMethod.POST

    def test_decorator_returns_function(self):
        """Decorated functions stay callable as before."""
        router = Router()

        @router.get("/a")
        @router.get("/b")
        def both(request):
            return ok()

        assert callable(both)
        assert [r.path for r in router.routes()] == ["/b", "/a"]


class TestHandlers:
    """Tests for Handler adapters."""

    def test_as_handler_wraps_function(self):
        handler = as_handler(dummy_handler)

        assert isinstance(handler, FunctionHandler)
        assert handler.handle(make_request("GET", "/x")).body == b"/x"

    def test_as_handler_keeps_handler(self):
        handler = CountingHandler()

        assert as_handler(handler) is handler

    def test_as_handler_rejects_non_callable(self):
        with pytest.raises(TypeError):
            as_handler("not a handler")

    def test_route_matches(self):
        route = Route(HTTPMethod.GET, "/ok", as_handler(dummy_handler))

        assert route.matches(HTTPMethod.GET, "/ok")
        assert not route.matches(HTTPMethod.POST, "/ok")
