"""``/page-meta``: title and ``<meta>`` tags of a remote page.

The page is streamed through lxml's ``HTMLPullParser``, and elements
are cleared once they close, so only the open ancestors of the current
chunk stay in memory.
"""

import logging

from lxml import etree

from edgebin.app import App
from edgebin.errors import CustomError
from edgebin.fetch import Fetcher
from edgebin.http.request import Request
from edgebin.http.response import Response

logger = logging.getLogger("edgebin.routes")


class PageMetaParser:
    """Collects the first ``<title>`` text and ``<meta>`` name/property -> content.

    Feed raw bytes as they arrive; *encoding* is the upstream charset,
    or ``None`` to let libxml2 sniff it from the document.
    """

    def __init__(self, encoding: str | None = None) -> None:
        self.title: str | None = None
        self.meta: dict[str, str] = {}
        self._parser = etree.HTMLPullParser(events=("start", "end"), encoding=encoding)
        self._fed = False

    def feed(self, data: bytes) -> None:
        if not data:
            return
        self._fed = True
        self._parser.feed(data)
        self._drain()

    def close(self) -> None:
        # libxml2 rejects closing a document that never received input
        if not self._fed:
            return
        try:
            self._parser.close()
        except etree.XMLSyntaxError as exc:
            logger.debug("Unparseable page tail: %s", exc)
        self._drain()

    def _drain(self) -> None:
        for event, element in self._parser.read_events():
            if not isinstance(element.tag, str):
                continue
            if event == "start":
                if element.tag == "meta":
                    key = element.get("name") or element.get("property")
                    content = element.get("content")
                    if key and content:
                        self.meta[key] = content
            else:
                if element.tag == "title" and self.title is None:
                    self.title = (element.text or "").strip()
                element.clear(keep_tail=True)


async def page_meta(request: Request, fetcher: Fetcher) -> Response:
    url = request.query.get("url")
    if not url:
        raise CustomError("Missing url query parameter", 400)

    async with fetcher.stream(url) as upstream:
        if not upstream.is_success:
            raise CustomError(
                f"Failed to fetch the URL: {upstream.status_code} {upstream.reason_phrase}", 400
            )

        content_type = upstream.headers.get("content-type", "")
        if "text/html" not in content_type.lower():
            # Not a page: hand the upstream document back untouched
            body = await upstream.aread()
            return Response(
                body=body,
                status=upstream.status_code,
                content_type=content_type or "application/octet-stream",
            )

        parser = PageMetaParser(upstream.charset_encoding)
        async for chunk in upstream.aiter_bytes():
            parser.feed(chunk)
        parser.close()
        final_url = str(upstream.url)

    return Response.json({"title": parser.title, "url": final_url, **parser.meta})


def register(app: App) -> None:
    app.route("/page-meta", name="page_meta")(page_meta)
