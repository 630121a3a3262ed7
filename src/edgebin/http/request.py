"""Immutable HTTP request.

Frozen metadata with async body access. Everything a diagnostic route
reports back (method, URL, headers, cookies, client address and
location) is captured at creation; the body is read lazily, once.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from edgebin._internal.asgi import Receive
from edgebin.http.cookies import parse_cookies
from edgebin.http.geo import GeoInfo, client_ip
from edgebin.http.headers import Headers
from edgebin.http.query import QueryParams

if TYPE_CHECKING:
    from edgebin.http.forms import FormData

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    scheme: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    cookies: Mapping[str, str]

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def mime_type(self) -> str:
        """Content-Type without parameters, lower-cased.

        Requests without a Content-Type are treated as opaque bytes.
        """
        raw = self.content_type or "application/octet-stream"
        return raw.split(";", 1)[0].strip().lower()

    @property
    def host(self) -> str:
        """Host the client addressed, from the Host header or the server socket."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is None:
            return "localhost"
        name, port = self.server
        if _DEFAULT_PORTS.get(self.scheme) == port:
            return name
        return f"{name}:{port}"

    @property
    def url(self) -> str:
        """Absolute request URL: scheme, host, path and query string."""
        qs = self.query.query_string
        base = f"{self.scheme}://{self.host}{self.path}"
        if qs:
            return f"{base}?{qs}"
        return base

    @property
    def client_ip(self) -> str | None:
        """Originating client IP, honouring edge proxy headers."""
        return client_ip(self.headers, self.client)

    @property
    def geo(self) -> GeoInfo:
        """Approximate client location from edge proxy headers."""
        if "_geo" not in self._cache:
            self._cache["_geo"] = GeoInfo.from_headers(self.headers)
        return self._cache["_geo"]

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            ValueError: The body is not valid JSON.
        """
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8, undecodable bytes replaced)."""
        raw = await self.body()
        return raw.decode("utf-8", errors="replace")

    async def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        Result is cached: the body is read and parsed once, then
        the same ``FormData`` is returned on subsequent calls.

        Raises:
            ValueError: If Content-Type is not a form encoding.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        from edgebin.http.forms import parse_form_data

        ct = self.content_type or "application/x-www-form-urlencoded"
        raw = await self.body()
        result = await parse_form_data(raw, ct)
        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Mapping[str, Any],
        receive: Receive,
        path_params: dict[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable.

        WebSocket scopes carry no method; they are recorded as ``GET``,
        the method of the upgrade request.
        """
        headers = Headers(tuple(scope.get("headers", ())))
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope.get("method", "GET"),
            path=scope["path"],
            scheme=scope.get("scheme", "http"),
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            path_params=path_params or {},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "")),
            _receive=receive,
        )
