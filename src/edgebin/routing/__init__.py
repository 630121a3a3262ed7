"""Routing: compiled route table with O(path-depth) matching.

Routes are registered on the app during setup and compiled into an
immutable trie when the app freezes.
"""

from edgebin.routing.route import HTTP_METHODS, WEBSOCKET, Route, RouteMatch
from edgebin.routing.router import Router

__all__ = ["HTTP_METHODS", "WEBSOCKET", "Route", "RouteMatch", "Router"]
