"""
=============================================================================
HANDLERS AND ROUTER
=============================================================================

A Handler turns a request into a response (or raises). It is the one
extension point the server exposes: anything that can handle a request
can be served.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        HANDLER FAMILY                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                    Handler (abstract)                                │
    │                    handle(request) → HTTPResponse                    │
    │                     ▲               ▲                                │
    │                     │               │                                │
    │          FunctionHandler         Router                              │
    │          wraps func(request)     ordered rules → Handler             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Since a Router is itself a Handler, a router can be mounted as the
handler of a rule in another router.

=============================================================================
ROUTING FLOW
=============================================================================

    Incoming Request: GET /ok
         │
         ▼
    ┌─────────────────────────────────────────────────────────────┐
    │  ROUTER (rules scanned in registration order)                │
    │                                                              │
    │   GET  /        → index                                      │
    │   GET  /ok      → ok_handler     ← first exact match wins    │
    │   POST /echo    → echo                                       │
    │                                                              │
    │   no match      → 404, same version as the request,          │
    │                   empty headers, empty body                  │
    └─────────────────────────────────────────────────────────────┘

Matching is exact and case-sensitive on both method and path:

    "/ok" does not match "/ok/", "/OK" or "/ok?x=1"

There are no path parameters, wildcards or prefixes. Keeping matching
to a string comparison keeps dispatch predictable.

=============================================================================
RULE SET LIFECYCLE
=============================================================================

Rules are appended during setup. The server calls freeze() before it
starts accepting connections; from then on the rule list is read-only,
and any later registration raises RuntimeError.

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from .message import HTTPMethod
from .request import HTTPRequest
from .response import HTTPResponse, not_found


# A plain function that takes a request and returns a response
HandlerFunc = Callable[[HTTPRequest], HTTPResponse]


class Handler(ABC):
    """
    The handler capability.

    Implementations may mutate the request they are given (the router
    passes the same object down) and may raise to signal failure.
    """

    @abstractmethod
    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Produce a response for ``request`` or raise."""

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle(request)


class FunctionHandler(Handler):
    """Adapts a plain ``func(request) -> HTTPResponse`` to Handler."""

    def __init__(self, func: HandlerFunc):
        self.func = func

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        return self.func(request)

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"FunctionHandler({name})"


def as_handler(handler: Union[Handler, HandlerFunc]) -> Handler:
    """Wrap a callable in FunctionHandler unless it already is a Handler."""
    if isinstance(handler, Handler):
        return handler
    if not callable(handler):
        raise TypeError(f"Handler must be callable, got {type(handler).__name__}")
    return FunctionHandler(handler)


@dataclass(frozen=True)
class Route:
    """
    One routing rule: (method, exact path) → handler.

        Route(method=HTTPMethod.GET, path="/ok", handler=<Handler>)
    """

    method: HTTPMethod
    path: str
    handler: Handler

    def matches(self, method: HTTPMethod, path: str) -> bool:
        return self.method == method and self.path == path


class Router(Handler):
    """
    Linear, exact-match request router.

    ==========================================================================
    DECORATOR-BASED API
    ==========================================================================

        router = Router()

        @router.get("/ok")
        def ok_handler(request):
            return ok()

        @router.post("/echo")
        def echo(request):
            return ok(request.body)

    Equivalent explicit form:

        router.add_route(HTTPMethod.GET, "/ok", ok_handler)

    ==========================================================================
    """

    def __init__(self):
        self._routes: List[Route] = []
        self._frozen = False

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        method: Union[HTTPMethod, str],
        path: str,
        handler: Union[Handler, HandlerFunc],
    ) -> Route:
        """
        Append a rule.

        Args:
            method: HTTPMethod or its token ("GET", "POST").
            path: Exact path to match.
            handler: A Handler, or a plain callable taking a request.

        Returns:
            The registered Route.

        Raises:
            RuntimeError: If the router has been frozen.
            ValueError: If the method is not supported.
        """
        if self._frozen:
            raise RuntimeError("Router is frozen; routes cannot be added")

        if not isinstance(method, HTTPMethod):
            method = HTTPMethod(method)

        route = Route(method=method, path=path, handler=as_handler(handler))
        self._routes.append(route)
        return route

    def route(self, method: Union[HTTPMethod, str], path: str) -> Callable[[HandlerFunc], HandlerFunc]:
        """
        Decorator for registering a rule.

        Returns the decorated function unchanged, so decorators stack.
        """
        def decorator(func: HandlerFunc) -> HandlerFunc:
            self.add_route(method, path, func)
            return func
        return decorator

    def get(self, path: str) -> Callable[[HandlerFunc], HandlerFunc]:
        """Register a GET rule."""
        return self.route(HTTPMethod.GET, path)

    def post(self, path: str) -> Callable[[HandlerFunc], HandlerFunc]:
        """Register a POST rule."""
        return self.route(HTTPMethod.POST, path)

    def freeze(self) -> None:
        """Make the rule set read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def match(self, method: HTTPMethod, path: str) -> Optional[Route]:
        """Return the first rule matching method AND path exactly, or None."""
        for route in self._routes:
            if route.matches(method, path):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request.

        The matching rule's handler is invoked with the request and its
        result (or exception) passes through untouched. Without a match
        the response is a 404 carrying the request's version.
        """
        route = self.match(request.method, request.path)
        if route is None:
            return not_found(request.version)
        return route.handler.handle(request)

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def routes(self) -> List[Route]:
        """Registered rules, in match order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print the rule table (useful for debugging).

        Example output:
            Registered Routes:
            ------------------------------------------------------------
              GET      /
              GET      /ok
              POST     /echo
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            print(f"  {route.method.token:8} {route.path}")
        print("-" * 60)
