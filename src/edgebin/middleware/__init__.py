"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    CORSMiddleware -- permissive CORS for a public diagnostic API
"""

from edgebin.middleware.cors import CORSConfig, CORSMiddleware
from edgebin.middleware.protocol import Middleware, Next

__all__ = ["CORSConfig", "CORSMiddleware", "Middleware", "Next"]
