"""ASGI websocket scope dispatch.

WebSocket endpoints live in the same router as HTTP routes under the
``WEBSOCKET`` pseudo-method. Upgrades never pass through the HTTP
middleware chain: once accepted, the session handler owns the socket
until either side closes it.
"""

import logging

from edgebin._internal.asgi import Receive, Scope, Send
from edgebin._internal.invoke import invoke
from edgebin._internal.types import Provider
from edgebin.errors import HTTPError
from edgebin.http.request import Request
from edgebin.http.websocket import POLICY_VIOLATION, WebSocket, WebSocketDisconnect
from edgebin.routing.route import WEBSOCKET
from edgebin.routing.router import Router
from edgebin.server.handler import build_handler_kwargs
from edgebin.server.terminal_errors import log_error

logger = logging.getLogger("edgebin.server")

# Close code sent when a session handler fails unexpectedly
INTERNAL_ERROR = 1011


async def handle_websocket(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    providers: dict[type, Provider] | None = None,
) -> None:
    """Run one WebSocket session from handshake to close."""
    websocket = WebSocket(scope, receive, send)
    path = scope["path"]

    try:
        match = router.match(WEBSOCKET, path)
    except HTTPError:
        logger.debug("Rejecting WebSocket upgrade for %s", path)
        # Closing before accept rejects the handshake (HTTP 403)
        await websocket.close(POLICY_VIOLATION)
        return

    request = Request.from_asgi(scope, receive, match.path_params)
    kwargs = build_handler_kwargs(
        match.route.handler, request, match.path_params, providers, websocket=websocket
    )

    try:
        await invoke(match.route.handler, **kwargs)
    except WebSocketDisconnect as exc:
        logger.debug("WebSocket %s closed by client (%d)", request.path, exc.code)
    except Exception as exc:
        log_error(exc, request, status=INTERNAL_ERROR)
        await websocket.close(INTERNAL_ERROR)
