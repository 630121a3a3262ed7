"""QR code rendering with segno.

Query options follow the usual QR generator vocabulary: ``text``,
``errorCorrectionLevel``, ``width`` or ``scale``, ``margin`` (quiet
zone in modules), ``color.dark`` and ``color.light``.
"""

import io
import re

import segno

from edgebin.app import App
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.parsing import string_to_int, string_to_number

DEFAULT_TEXT = "Edgebin is awesome!"
DEFAULT_WIDTH = 350
DEFAULT_SCALE = 4
DEFAULT_MARGIN = 4
ERROR_LEVELS = ("L", "M", "Q", "H")

_BARE_HEX = re.compile(r"[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8}")


def render_svg(
    text: str,
    *,
    error: str = "H",
    width: int | None = DEFAULT_WIDTH,
    scale: float | None = None,
    margin: int = DEFAULT_MARGIN,
    dark: str = "#000000",
    light: str = "#ffffff",
) -> bytes:
    """Render *text* as an SVG QR code.

    A *width* in pixels sizes the whole symbol and wins over *scale*
    (pixels per module); with neither, modules are ``DEFAULT_SCALE``
    pixels. Unknown colors raise ``ValueError``.
    """
    qr = segno.make(text, error=error.lower(), boost_error=False)
    if width is not None:
        modules, _ = qr.symbol_size(border=margin)
        scale = max(width / modules, 1)
    out = io.BytesIO()
    qr.save(
        out,
        kind="svg",
        scale=scale or DEFAULT_SCALE,
        border=margin,
        dark=dark,
        light=light,
        xmldecl=False,
    )
    return out.getvalue()


def _color(value: str) -> str:
    # "ff0000" is accepted as shorthand for "#ff0000"
    return f"#{value}" if _BARE_HEX.fullmatch(value) else value


def qrcode(request: Request) -> Response:
    query = request.query
    kind = query.get("type") or "svg"
    if kind != "svg":
        raise CustomError(f"Unsupported type {kind!r}, only svg is available", 400)

    error = (query.get("errorCorrectionLevel") or "H").upper()
    if error not in ERROR_LEVELS:
        raise CustomError(
            f"Invalid errorCorrectionLevel {error!r}, expected one of: {', '.join(ERROR_LEVELS)}",
            400,
        )

    width: int | None = DEFAULT_WIDTH
    scale: float | None = None
    if "width" in query:
        width = string_to_int(query.get("width"), what="width")
        if width <= 0:
            raise CustomError(f"width must be positive, got {width}", 400)
    elif "scale" in query:
        width = None
        scale = string_to_number(query.get("scale"), what="scale")
        if scale <= 0:
            raise CustomError(f"scale must be positive, got {scale}", 400)

    margin = DEFAULT_MARGIN
    if "margin" in query:
        margin = string_to_int(query.get("margin"), what="margin")
        if margin < 0:
            raise CustomError(f"margin must not be negative, got {margin}", 400)

    dark = _color(query.get("color.dark") or "#000000")
    light = _color(query.get("color.light") or "#ffffff")

    text = query.get("text") or DEFAULT_TEXT
    try:
        svg = render_svg(
            text, error=error, width=width, scale=scale, margin=margin, dark=dark, light=light
        )
    except segno.DataOverflowError as exc:
        raise CustomError(f"Text does not fit in a QR code: {exc}", 400) from None
    except ValueError as exc:
        raise CustomError(f"Invalid color: {exc}", 400) from None

    return Response(body=svg, content_type="image/svg+xml").with_header(
        "Cache-Control", "public, max-age=3600"
    )


def register(app: App) -> None:
    app.route("/qrcode", name="qrcode")(qrcode)
