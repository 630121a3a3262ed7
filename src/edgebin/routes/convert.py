"""Markdown <-> HTML conversion.

Input comes from, in order of precedence: the ``url`` query parameter
(fetched), the request body, or the ``text`` query parameter.
"""

import logging

from markdownify import markdownify
from patitas import Markdown

from edgebin.app import App
from edgebin.errors import CustomError
from edgebin.fetch import Fetcher
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.parsing import is_textual

logger = logging.getLogger("edgebin.routes")

_markdown = Markdown(plugins=["all"], highlight=False)


async def read_source(request: Request, fetcher: Fetcher) -> str:
    """Resolve the document to convert.

    Raises:
        CustomError: Nothing to convert, the fetched URL answered with an
            error (its status is reused), or it is not a text document.
    """
    url = request.query.get("url")
    if url:
        upstream = await fetcher.get(url)
        if not upstream.is_success:
            raise CustomError(
                f"Failed to fetch the URL: {upstream.status_code} {upstream.reason_phrase}",
                upstream.status_code,
            )
        content_type = upstream.headers.get("content-type", "")
        if not is_textual(content_type):
            raise CustomError(f"Expected a text document, got {content_type or 'unknown'}", 400)
        return upstream.text

    body = await request.text()
    if body:
        return body

    text = request.query.get("text")
    if text:
        return text
    raise CustomError("Nothing to convert: pass url, text or a request body", 400)


def render_markdown(source: str) -> str:
    return _markdown(source)


def html_to_markdown(source: str) -> str:
    return markdownify(source, heading_style="ATX")


async def md2html(request: Request, fetcher: Fetcher) -> Response:
    source = await read_source(request, fetcher)
    logger.debug("Rendering %d characters of Markdown", len(source))
    return Response(body=render_markdown(source), content_type="text/html; charset=utf-8")


async def html2md(request: Request, fetcher: Fetcher) -> Response:
    source = await read_source(request, fetcher)
    logger.debug("Converting %d characters of HTML", len(source))
    return Response(body=html_to_markdown(source), content_type="text/markdown; charset=utf-8")


def register(app: App) -> None:
    app.route("/md2html", "/markdown", name="md2html")(md2html)
    app.route("/html2md", name="html2md")(html2md)
