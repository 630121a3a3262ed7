"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from edgebin._internal.types import Handler

# Every diagnostic route answers these methods identically
HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"})

# Pseudo-method under which WebSocket endpoints share the HTTP trie
WEBSOCKET = "WEBSOCKET"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/status``        (is_param=False)
    Param:   ``/{code}``        (is_param=True, param_name="code")
    Rest:    ``/{data:path}``   (is_param=True, param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Handler
    methods: frozenset[str]
    name: str | None = None

    @property
    def is_websocket(self) -> bool:
        return WEBSOCKET in self.methods


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
