"""Static sample documents, images and character encodings."""

import logging
import re

from edgebin.app import App
from edgebin.assets import Asset, AssetStore
from edgebin.errors import CustomError, NotFound
from edgebin.http.request import Request
from edgebin.http.response import Response

logger = logging.getLogger("edgebin.routes")

IMAGE_FORMATS = ("png", "jpeg", "webp", "svg")

# Accept media type -> image format, most preferred first
_ACCEPT_PREFERENCE = (
    ("image/webp", "webp"),
    ("image/svg+xml", "svg"),
    ("image/jpeg", "jpeg"),
    ("image/png", "png"),
    ("image/*", "png"),
    ("*/*", "png"),
)

_META_CHARSET_RE = re.compile(rb'<meta\s+charset="[^"]*"\s*/?>', re.IGNORECASE)


def serve_asset(assets: AssetStore, name: str) -> Response:
    """Serve asset *name* with its stored content type, 404 when absent."""
    asset = assets.get(name)
    if asset is None:
        logger.debug("Asset %s is missing", name)
        raise NotFound(f"Asset {name!r} not found")
    return Response(body=asset.body, content_type=asset.content_type)


def _accepted_types(accept: str) -> set[str]:
    return {part.split(";", 1)[0].strip().lower() for part in accept.split(",") if part.strip()}


def negotiate_image_format(accept: str | None) -> str | None:
    """Pick an image format for an ``Accept`` header, or ``None`` if nothing fits.

    A missing ``Accept`` header fits nothing.
    """
    if not accept:
        return None
    accepted = _accepted_types(accept)
    for media_type, image_format in _ACCEPT_PREFERENCE:
        if media_type in accepted:
            return image_format
    return None


def index(assets: AssetStore) -> Response:
    return serve_asset(assets, "index.html")


def image(request: Request, assets: AssetStore, format: str | None = None) -> Response:
    if format is None:
        chosen = negotiate_image_format(request.headers.get("accept"))
        if chosen is None:
            raise CustomError("Client did not request a supported media type", 406)
        format = chosen
    elif format not in IMAGE_FORMATS:
        raise CustomError(
            f"Unsupported image format {format!r}, expected one of: {', '.join(IMAGE_FORMATS)}",
            400,
        )
    return serve_asset(assets, f"image.{format}")


def html(assets: AssetStore) -> Response:
    return serve_asset(assets, "response.html")


def xml(assets: AssetStore) -> Response:
    return serve_asset(assets, "response.xml")


def json_document(assets: AssetStore) -> Response:
    return serve_asset(assets, "response.json")


def transcode_html(asset: Asset, charset: str) -> Response:
    """Re-encode a UTF-8 HTML document and declare *charset* everywhere."""
    text = asset.body.decode("utf-8")
    body = text.encode(charset, errors="xmlcharrefreplace")
    body = _META_CHARSET_RE.sub(f'<meta charset="{charset}">'.encode("ascii"), body, count=1)
    return Response(body=body, content_type=f"text/html; charset={charset}")


def encoding(assets: AssetStore, charset: str = "utf-8") -> Response:
    """The sample HTML document in UTF-8 (default) or GB2312."""
    charset = charset.lower()
    if charset in ("utf-8", "utf8"):
        return serve_asset(assets, "response.html")
    if charset != "gb2312":
        raise CustomError(f"Unsupported charset {charset!r}, expected utf-8 or gb2312", 400)
    asset = assets.get("response.html")
    if asset is None:
        raise NotFound("Asset 'response.html' not found")
    return transcode_html(asset, charset)


def robots_txt(assets: AssetStore) -> Response:
    return serve_asset(assets, "robots.txt")


def deny(assets: AssetStore) -> Response:
    return serve_asset(assets, "deny.txt")


def register(app: App) -> None:
    app.route("/", name="index")(index)
    app.route("/image", "/image/{format}", name="image")(image)
    app.route("/html", name="html")(html)
    app.route("/xml", name="xml")(xml)
    app.route("/json", name="json")(json_document)
    app.route("/encoding", "/encoding/{charset}", name="encoding")(encoding)
    app.route("/robots.txt", name="robots_txt")(robots_txt)
    app.route("/deny", name="deny")(deny)
