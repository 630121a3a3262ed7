"""Serving an App with pounce.

pounce's ``run()`` takes an import string (e.g. ``"edgebin:app"``),
but ``edgebin run`` builds a live ``App`` object from CLI flags, so
``pounce.Server`` is driven directly with the ASGI callable.
"""

import logging

logger = logging.getLogger("edgebin.server")


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    workers: int = 1,
    reload: bool = False,
) -> None:
    """Start a pounce server for the given App.

    Args:
        app: ASGI callable (edgebin App instance).
        host: Bind host address.
        port: Bind port number.
        workers: Worker count; forced to 1 when *reload* is on.
        reload: Restart on source changes (development only).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
    )
    logger.info("Serving edgebin on http://%s:%d (workers=%d)", host, port, config.workers)
    Server(config, app).run()
