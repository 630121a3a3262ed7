"""ASGI handler: translates ASGI scope/messages to edgebin types.

The only component that touches raw HTTP ASGI messages directly.
Converts scope dicts to typed Request objects, dispatches through
middleware and routing, translates errors, and sends the Response back
through ASGI send().
"""

import functools
import inspect
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from edgebin._internal.asgi import Receive, Scope, Send
from edgebin._internal.invoke import invoke
from edgebin._internal.types import Handler, Provider
from edgebin.errors import CustomError, HTTPError, NotFound
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.http.websocket import WebSocket
from edgebin.middleware.protocol import Next
from edgebin.routing.route import RouteMatch
from edgebin.routing.router import Router
from edgebin.server.errors import handle_custom_error, handle_http_error, handle_internal_error
from edgebin.server.negotiation import negotiate
from edgebin.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    providers: dict[type, Provider] | None = None,
    fallback: Handler | None = None,
    unexpected_error_status: int = 499,
) -> None:
    """Process a single HTTP request through the full pipeline.

    Errors are translated inside the middleware chain, so error
    responses are decorated (CORS) exactly like successful ones.
    *fallback* answers paths no route matches; it may raise
    ``NotFound`` itself.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    def translate(exc: Exception, req: Request) -> Response:
        if isinstance(exc, CustomError):
            return handle_custom_error(exc, req)
        if isinstance(exc, HTTPError):
            return handle_http_error(exc, req)
        return handle_internal_error(exc, req, status=unexpected_error_status)

    async def dispatch(req: Request) -> Response:
        try:
            try:
                match = router.match(req.method, req.path)
            except NotFound:
                if fallback is None:
                    raise
                return negotiate(await invoke(fallback, req))
            return await _invoke_handler(match, req, providers=providers)
        except Exception as exc:
            return translate(exc, req)

    # Wrap middleware around the dispatch
    handler = dispatch
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        handler = make_next

    try:
        response = await handler(request)
    except Exception as exc:
        # A middleware failed outside the translated dispatch
        response = translate(exc, request)

    await send_response(response, send, head=request.method == "HEAD")


async def _invoke_handler(
    match: RouteMatch,
    request: Request,
    *,
    providers: dict[type, Provider] | None = None,
) -> Response:
    """Call the matched route handler and negotiate its return value."""
    handler = match.route.handler

    # Same request, now carrying path params; _cache (body) is shared
    request = replace(request, path_params=match.path_params)

    kwargs = build_handler_kwargs(handler, request, match.path_params, providers)
    result = await invoke(handler, **kwargs)
    return negotiate(result)


@functools.cache
def _signature(handler: Handler) -> inspect.Signature:
    return inspect.signature(handler, eval_str=True)


def build_handler_kwargs(
    handler: Handler,
    request: Request,
    path_params: dict[str, str],
    providers: dict[type, Provider] | None = None,
    *,
    websocket: WebSocket | None = None,
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. ``websocket`` parameter (by name or ``WebSocket`` annotation)
    3. Path parameters (by name, always ``str``)
    4. Service providers (by type annotation via ``app.provide()``)

    Parameters that match nothing keep their defaults, which is how
    optional path segments (``/uuid`` vs ``/uuid/{count}``) reach a
    single handler.
    """
    kwargs: dict[str, Any] = {}

    for name, param in _signature(handler).parameters.items():
        annotation = param.annotation
        if name == "request" or annotation is Request:
            kwargs[name] = request
        elif websocket is not None and (name == "websocket" or annotation is WebSocket):
            kwargs[name] = websocket
        elif name in path_params:
            kwargs[name] = path_params[name]
        elif providers and annotation is not inspect.Parameter.empty and annotation in providers:
            kwargs[name] = providers[annotation]()

    return kwargs
