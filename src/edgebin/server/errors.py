"""Error translation for edgebin requests.

Maps the two declared error families and unexpected failures to
Response objects:

- ``CustomError``  -> ``{"message", "code", "url"}`` with ``code`` as status
- ``NotFound``     -> ``{"error": "'<url>' not found", "pathname"}``
- ``HTTPError``    -> same shape as ``CustomError``
- anything else    -> HTML snippet with the message and stack trace
"""

import html
import logging
import traceback

from edgebin.errors import CustomError, HTTPError, NotFound
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.server.terminal_errors import log_error

logger = logging.getLogger("edgebin.server")


def handle_custom_error(exc: CustomError, request: Request) -> Response:
    """Render a declared domain error as JSON with its own status."""
    logger.debug("%d %s %s: %s", exc.code, request.method, request.path, exc.message)
    body = {"message": exc.message, "code": exc.code, "url": request.url}
    return Response.json(body, status=exc.code).with_headers(exc.headers)


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Render a routing-level error raised by the framework."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    if isinstance(exc, NotFound):
        body: dict[str, object] = {
            "error": f"'{request.url}' not found",
            "pathname": request.path,
        }
    else:
        body = {
            "message": exc.detail or f"Error {exc.status}",
            "code": exc.status,
            "url": request.url,
        }
    return Response.json(body, status=exc.status).with_headers(exc.headers)


def render_unexpected_error(exc: BaseException) -> str:
    """HTML snippet with the escaped message and stack trace."""
    stack = "".join(traceback.format_exception(exc))
    return f"<h1>{html.escape(str(exc))}</h1><p>{html.escape(stack)}</p>"


def handle_internal_error(exc: Exception, request: Request, *, status: int = 499) -> Response:
    """Log an unexpected failure once and render it for the caller."""
    log_error(exc, request, status=status)
    return Response(body=render_unexpected_error(exc), status=status)
