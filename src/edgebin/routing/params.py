"""Path parameter patterns.

``{name}`` captures one segment; ``{name:path}`` captures the rest of
the path, slashes included. Values always reach handlers as strings so
that each route can reject malformed input with its own message.
"""

# Converter name -> regex a captured segment must match
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "path": r".+",
}
