"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. Matching is case-sensitive:
``/GET`` is not ``/get``.
"""

import re
from dataclasses import dataclass

from edgebin.errors import ConfigurationError, MethodNotAllowed, NotFound
from edgebin.routing.params import CONVERTERS
from edgebin.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/status"              -> [PathSegment("status")]
        "/status/{code}"       -> [PathSegment("status"), PathSegment("{code}", is_param=True)]
        "/base64/{data:path}"  -> [..., PathSegment("{data:path}", param_type="path")]

    Raises:
        ConfigurationError: Unknown converter, or a ``path`` parameter
            that is not the last segment.
    """
    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue
        inner = part[1:-1]
        param_name, _, param_type = inner.partition(":")
        param_type = param_type or "str"
        if param_type not in CONVERTERS:
            msg = f"Unknown path converter {param_type!r} in route {path!r}"
            raise ConfigurationError(msg)
        if param_type == "path" and index != len(parts) - 1:
            msg = f"Path parameter {part!r} must be the last segment of {path!r}"
            raise ConfigurationError(msg)
        segments.append(
            PathSegment(value=part, is_param=True, param_name=param_name, param_type=param_type)
        )
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.param_child: _ParamEdge | None = None
        self.catch_all: _CatchAllEdge | None = None
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """Consumes the remaining path."""

    param_name: str
    routes_by_method: dict[str, Route]


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/status/{code}", handler, HTTP_METHODS))
        router.compile()
        match = router.match("GET", "/status/418")
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path", routes_by_method={}
                    )
                self._register(node.catch_all.routes_by_method, route)
                return

            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        regex=re.compile(f"^{CONVERTERS[seg.param_type]}$"),
                        node=_TrieNode(),
                    )
                elif node.param_child.param_name != seg.param_name:
                    msg = (
                        f"Route {route.path!r} names its parameter {seg.param_name!r}, "
                        f"but a sibling route already uses {node.param_child.param_name!r}"
                    )
                    raise ConfigurationError(msg)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._register(node.routes_by_method, route)

    @staticmethod
    def _register(table: dict[str, Route], route: Route) -> None:
        for method in route.methods:
            if method in table:
                msg = f"Duplicate route: {method} {route.path!r}"
                raise ConfigurationError(msg)
            table[method] = route

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in trie order, each listed once."""
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        tables = [node.routes_by_method]
        if node.catch_all is not None:
            tables.append(node.catch_all.routes_by_method)
        for table in tables:
            for route in table.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)

        for child in node.children.values():
            self._collect_routes(child, seen, result)
        if node.param_child is not None:
            self._collect_routes(node.param_child.node, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        table, params = result
        if method in table:
            return RouteMatch(route=table[method], path_params=params)
        raise MethodNotAllowed(frozenset(table))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        """Recursively match path parts against the trie.

        Static children win over parameters, parameters over catch-alls.
        """
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params)
                if result is not None:
                    return result

        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.routes_by_method, {
                **params,
                node.catch_all.param_name: remaining,
            }

        return None
