"""``edgebin routes``: list registered routes.

Prints every compiled route with method, path, and handler info.
"""

from edgebin.config import AppConfig
from edgebin.routes import create_app


def run_routes(config: AppConfig) -> None:
    """Print a table of METHOD, PATH, and handler name."""
    routes = create_app(config).routes

    # Build rows: (methods_str, path, handler_name)
    rows: list[tuple[str, str, str]] = []
    for route in sorted(routes, key=lambda r: (r.path, r.is_websocket)):
        methods_str = ", ".join(sorted(route.methods))
        handler_name = getattr(route.handler, "__name__", str(route.handler))
        if route.name and route.name != handler_name:
            handler_name = f"{handler_name} ({route.name})"
        rows.append((methods_str, route.path, handler_name))

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for methods_str, path, handler_name in rows:
        print(fmt.format(methods_str, path, handler_name))
