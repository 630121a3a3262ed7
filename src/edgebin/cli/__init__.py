"""Edgebin CLI: serve the diagnostic API or list its routes.

Entry point registered as ``edgebin`` in ``pyproject.toml``::

    [project.scripts]
    edgebin = "edgebin.cli:main"
"""

import argparse
import logging
import sys

LOG_LEVELS = ("debug", "info", "warning", "error")


def _add_app_options(parser: argparse.ArgumentParser) -> None:
    """Options that change how the app is assembled."""
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Answer unmatched paths with a JSON 404 instead of serving assets",
    )
    parser.add_argument(
        "--assets",
        metavar="DIR",
        default=None,
        help="Directory overriding the bundled sample assets",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``edgebin`` command."""
    parser = argparse.ArgumentParser(
        prog="edgebin",
        description="Edgebin: an HTTP request and response diagnostic service.",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging verbosity (default: EDGEBIN_LOG_LEVEL or info)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- edgebin run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--workers", type=int, default=None, help="Worker count")
    run_parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Single worker with auto-reload and verbose logging",
    )
    _add_app_options(run_parser)

    # -- edgebin routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    _add_app_options(routes_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from edgebin.cli._config import config_from_args

    config = config_from_args(args)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        from edgebin.cli._run import run_server

        run_server(config)
    elif args.command == "routes":
        from edgebin.cli._routes import run_routes

        run_routes(config)
