"""Edgebin: an HTTP request and response diagnostic service.

Echoes, transforms and reflects request data (headers, body, cookies,
client IP and location, status codes, delays, redirects) for testing
HTTP clients, and bundles a few utilities: Markdown/HTML conversion,
QR codes, a GitHub -> Telegram webhook relay, page metadata scraping
and a WebSocket echo.

Basic usage::

    from edgebin import create_app

    app = create_app()
    app.run()

or from the shell::

    edgebin run --port 8000
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "CustomError",
    "EdgebinError",
    "Fetcher",
    "HTTPError",
    "MemoryAssets",
    "MethodNotAllowed",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "WebSocket",
    "create_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import edgebin`` fast while providing a clean top-level API.
    """
    if name == "App":
        from edgebin.app import App

        return App

    if name == "AppConfig":
        from edgebin.config import AppConfig

        return AppConfig

    if name == "create_app":
        from edgebin.routes import create_app

        return create_app

    if name == "Request":
        from edgebin.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from edgebin.http import response as _resp

        return getattr(_resp, name)

    if name == "WebSocket":
        from edgebin.http.websocket import WebSocket

        return WebSocket

    if name == "Fetcher":
        from edgebin.fetch import Fetcher

        return Fetcher

    if name == "MemoryAssets":
        from edgebin.assets import MemoryAssets

        return MemoryAssets

    if name in (
        "ConfigurationError",
        "CustomError",
        "EdgebinError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
    ):
        from edgebin import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
