"""CORS decoration for every HTTP response.

The service is meant to be called from any page, so every origin is
allowed. A request that names its ``Origin`` gets that origin echoed
back with credentials enabled; anonymous requests get ``*``.
"""

from dataclasses import dataclass

from edgebin.config import AppConfig
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration."""

    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type", "Authorization")

    @classmethod
    def from_app_config(cls, config: AppConfig) -> "CORSConfig":
        return cls(
            allow_methods=config.cors_allow_methods,
            allow_headers=config.cors_allow_headers,
        )


class CORSMiddleware:
    """Adds CORS headers to every response and answers preflights.

    ``OPTIONS`` short-circuits to an empty 204 before routing; every
    other response, including error responses, is decorated on the
    way out.

    Usage::

        app.add_middleware(CORSMiddleware())
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def decorate(self, response: Response, origin: str | None) -> Response:
        """Return *response* with the CORS headers applied."""
        cfg = self.config
        if origin:
            response = response.replace_header("Access-Control-Allow-Origin", origin)
            response = response.with_header("Vary", "Origin")
            response = response.replace_header("Access-Control-Allow-Credentials", "true")
        else:
            response = response.replace_header("Access-Control-Allow-Origin", "*")
        response = response.replace_header(
            "Access-Control-Allow-Methods", ",".join(cfg.allow_methods)
        )
        return response.replace_header(
            "Access-Control-Allow-Headers", ",".join(cfg.allow_headers)
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        origin = request.headers.get("origin")
        if request.method == "OPTIONS":
            return self.decorate(Response(body="", status=204), origin)
        response = await next(request)
        return self.decorate(response, origin)
