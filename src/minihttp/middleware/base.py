"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

Middleware wraps the router's dispatch with behavior that applies to every
request: access logging and content-encoding negotiation.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      Pipeline (onion) layout                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   LoggingMiddleware          ← outermost: sees the final response    │
    │     CompressionMiddleware    ← encodes body, sets Content-Length     │
    │       router.handle          ← picks and runs the handler            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Request flows INWARD (first added first), response flows OUTWARD (last
added first).

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# Whatever sits one layer further in: another middleware or the router
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    One layer of the pipeline.

    A layer receives the request and the next layer, and returns the
    response. It may look at the request before calling `next`, and at the
    response (or the exception) after.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        ...

    @property
    def name(self) -> str:
        return type(self).__name__


class MiddlewarePipeline:
    """
    Ordered middleware around one final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware()).add(CompressionMiddleware())
        handler = pipeline.wrap(router.handle)

    The first middleware added is the outermost layer.
    """

    def __init__(self):
        self._layers: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append `middleware` inside the layers added so far."""
        self._layers.append(middleware)
        logger.debug(f"Middleware layer {len(self._layers)}: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the call chain around `handler`.

        Layers are bound innermost first, so for [Logging, Compression]:

            Logging(request, Compression(request, handler))
        """
        chain = handler
        for layer in reversed(self._layers):
            chain = _bind(layer, chain)
        return chain


def _bind(layer: Middleware, inner: NextHandler) -> NextHandler:
    def call(request: HTTPRequest) -> HTTPResponse:
        return layer(request, inner)
    return call
