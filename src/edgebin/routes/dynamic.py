"""Routes whose answers are computed: status codes, delays, random data, dates."""

import asyncio
import base64
import binascii
import secrets
import uuid
from typing import Any

from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.dates import DEFAULT_LOCALE, format_date
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.parsing import string_to_int, string_to_number
from edgebin.server.sender import body_allowed

BASE64_EXAMPLE = "/base64/SFRUUEJJTiBpcyBhd2Vzb21l"


def status(code: str | None = None) -> Response:
    """Answer with the requested status and a ``{"code"}`` body."""
    value = string_to_int(code, what="status code")
    if not 200 <= value <= 599:
        raise CustomError(f"Status code must be in 200..599, got {value}", 400)
    if not body_allowed(value):
        return Response(body=b"", status=value)
    return Response.json({"code": value}, status=value)


async def delay(config: AppConfig, seconds: str | None = None) -> dict[str, Any]:
    value = string_to_number(seconds, what="delay")
    if value < 0:
        raise CustomError(f"Delay must not be negative, got {value}", 400)
    value = min(value, config.max_delay)
    await asyncio.sleep(value)
    return {"delay": value}


def random_bytes(config: AppConfig, n: str | None = None) -> Response:
    size = string_to_int(n, what="byte count")
    if not 1 <= size <= config.max_bytes:
        raise CustomError(f"Byte count must be in 1..{config.max_bytes}, got {size}", 400)
    return Response(body=secrets.token_bytes(size), content_type="application/octet-stream")


def decode_base64(data: str | None = None) -> Response:
    if not data:
        raise CustomError(f"Missing base64 data, try {BASE64_EXAMPLE}", 400)
    try:
        text = base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise CustomError(
            f"Incorrect base64 data, try {BASE64_EXAMPLE}", 400
        ) from None
    return Response(body=text, content_type="text/plain; charset=utf-8")


def uuids(config: AppConfig, count: str | None = None) -> dict[str, list[str]]:
    """One UUIDv4 by default, up to ``max_uuids``; larger counts are clamped."""
    n = 1 if count is None else string_to_int(count, what="uuid count")
    if n <= 0:
        raise CustomError(f"uuid count must be positive, got {n}", 400)
    n = min(n, config.max_uuids)
    return {"uuid": [str(uuid.uuid4()) for _ in range(n)]}


def date(request: Request, config: AppConfig) -> dict[str, Any]:
    query = request.query
    timezone = query.get("timeZone") or request.geo.timezone or config.default_timezone
    value = format_date(
        fmt=query.get("format") or "iso",
        timezone=timezone,
        locale=query.get("locale") or DEFAULT_LOCALE,
    )
    return {"date": value}


def register(app: App) -> None:
    app.route("/status", "/status/{code}", name="status")(status)
    app.route("/delay", "/delay/{seconds}", name="delay")(delay)
    app.route("/bytes", "/bytes/{n}", name="bytes")(random_bytes)
    app.route("/base64", "/base64/{data:path}", name="base64")(decode_base64)
    app.route("/uuid", "/uuid/{count}", name="uuid")(uuids)
    app.route("/date", name="date")(date)
