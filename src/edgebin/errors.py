"""Edgebin exception hierarchy.

Shared across the router, the handlers and the ASGI entry point so every
module raises and catches the same types.

Two families reach the entry point:

- ``CustomError``: an anticipated failure (bad parameter, failed upstream
  fetch, missing credentials). Its ``code`` is the HTTP status.
- ``HTTPError``: routing-level failures raised by the framework itself
  (no route, method not allowed).

Anything else is an unexpected failure.
"""

from dataclasses import dataclass


class EdgebinError(Exception):
    """Base for all edgebin-specific errors."""


class ConfigurationError(EdgebinError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()`` at startup.
    """


class CustomError(EdgebinError):
    """A domain error carrying a human message and an HTTP status code.

    Handlers raise it for every validation or upstream failure; the entry
    point renders it as ``{"message", "code", "url"}`` with ``code`` as
    the response status. ``headers`` are copied onto the error response
    (e.g. ``WWW-Authenticate`` for 401s).
    """

    def __init__(
        self,
        message: str,
        code: int = 400,
        *,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.headers = headers

    def __repr__(self) -> str:
        return f"CustomError({self.message!r}, {self.code})"


@dataclass(frozen=True, slots=True)
class HTTPError(EdgebinError):
    """An error that maps directly to an HTTP status code.

    Raised by the router. The ASGI handler catches these and renders
    them as JSON error bodies.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 - conventional name in web frameworks
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 - conventional name in web frameworks
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
