"""Edgebin application class.

Mutable during setup (route registration, middleware, providers).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from edgebin._internal.asgi import Receive, Scope, Send
from edgebin._internal.types import Handler, Provider
from edgebin.config import AppConfig
from edgebin.errors import ConfigurationError
from edgebin.middleware.protocol import Middleware
from edgebin.routing.route import HTTP_METHODS, WEBSOCKET, Route
from edgebin.routing.router import Router
from edgebin.server.handler import handle_request
from edgebin.server.websocket import handle_websocket

logger = logging.getLogger("edgebin.server")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    methods: frozenset[str]
    name: str | None


class App:
    """The edgebin application.

    Mutable during setup (routes, middleware, providers).
    Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread compiles the app, even
        when several pounce workers take their first request at once.
    """

    __slots__ = (
        "_fallback",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_pending_routes",
        "_providers",
        "_router",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._providers: dict[type, Provider] = {}
        self._fallback: Handler | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()

    # -- Route registration --

    def route(
        self,
        *paths: str,
        methods: Iterable[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Several paths may share one handler, which is how optional
        segments are expressed::

            @app.route("/uuid", "/uuid/{count}")
            def uuids(count: str | None = None): ...

        Args:
            paths: URL path patterns. Use ``{param}`` for one segment,
                ``{param:path}`` for the rest of the path.
            methods: HTTP methods. Defaults to every method the
                diagnostic API answers (GET, POST, PUT, DELETE, PATCH, HEAD).
            name: Optional route name, shown by ``edgebin routes``.
        """
        allowed = frozenset(m.upper() for m in methods) if methods else HTTP_METHODS

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            for path in paths:
                self._pending_routes.append(_PendingRoute(path, func, allowed, name))
            return func

        return decorator

    def websocket(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a WebSocket session handler via decorator.

        The handler receives the ``WebSocket`` (by name or annotation)
        and owns it until the session ends.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, frozenset({WEBSOCKET}), name))
            return func

        return decorator

    def fallback(self, func: Handler) -> Handler:
        """Register the handler for paths no route matches.

        It receives the ``Request`` and may raise ``NotFound``.
        """
        self._check_not_frozen()
        self._fallback = func
        return func

    # -- Service injection --

    def provide(self, annotation: type, factory: Provider) -> None:
        """Register a provider factory for dependency injection.

        When a handler parameter's type annotation matches *annotation*,
        edgebin calls *factory* (with no arguments) and injects the result::

            app.provide(Fetcher, lambda: fetcher)

            @app.route("/page-meta")
            async def page_meta(request: Request, fetcher: Fetcher): ...
        """
        self._check_not_frozen()
        self._providers[annotation] = factory

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Compiled routes (freezes the app)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it with pounce.

        ``config.debug`` turns on auto-reload with a single worker.
        """
        self._ensure_frozen()

        from edgebin.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            workers=self.config.workers,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan directly, then delegates HTTP and WebSocket
        scopes to their pipelines.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None

        if scope["type"] == "websocket":
            await handle_websocket(
                scope,
                receive,
                send,
                router=self._router,
                providers=self._providers or None,
            )
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            providers=self._providers or None,
            fallback=self._fallback,
            unexpected_error_status=self.config.unexpected_error_status,
        )

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        The app holds no resources, so startup only compiles the routes;
        a route table that fails to compile is reported as a failed
        startup instead of surfacing on the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except ConfigurationError as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=pending.methods,
                    name=pending.name,
                )
            )
        router.compile()
        self._router = router
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug("Compiled %d routes", len(self._pending_routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and providers before calling app.run()."
            )
            raise RuntimeError(msg)
