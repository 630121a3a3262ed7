"""Shared type aliases used across edgebin modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: a function with a variable signature, resolved per request
Handler: TypeAlias = Callable[..., Any]

# Service provider: zero-argument factory registered with ``App.provide``
Provider: TypeAlias = Callable[[], Any]
