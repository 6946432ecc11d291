"""
Middleware applied around the router: access logging and gzip encoding.
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .compression import CompressionMiddleware, accepts_gzip, encode_response
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "CompressionMiddleware",
    "LoggingMiddleware",
    "RequestLog",
    "accepts_gzip",
    "encode_response",
]
