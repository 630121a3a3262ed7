"""Request and response inspection routes.

The echo family (``/get``, ``/anything``...) describes the request it
received; ``/cache`` and the compression routes wrap that same
description in caching or encoding headers.
"""

import brotli
import gzip
import json
import uuid
import zlib
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime
from typing import Any

from edgebin._internal.multimap import fold_pairs
from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.response import JSON_CONTENT_TYPE, Response
from edgebin.parsing import data_url, is_textual, string_to_int

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def describe_body(request: Request) -> dict[str, Any]:
    """Interpret the request body according to its Content-Type.

    - JSON -> ``json`` (an empty body is ``null``)
    - ``text/*`` -> ``data`` as text
    - forms -> ``form`` and ``files``
    - anything else -> ``data`` as a base64 data URL, omitted when empty
    """
    mime = request.mime_type

    if mime == "application/json" or mime.endswith("+json"):
        raw = await request.body()
        if not raw.strip():
            return {"json": None}
        try:
            return {"json": json.loads(raw)}
        except ValueError as exc:
            raise CustomError(f"Invalid JSON body: {exc}", 400) from None

    if mime.startswith("text/"):
        return {"data": await request.text()}

    if mime in FORM_TYPES:
        try:
            form = await request.form()
        except ValueError as exc:
            raise CustomError(f"Invalid form body: {exc}", 400) from None
        files = fold_pairs(
            (name, describe_upload(upload.filename, upload.content_type, upload.content))
            for name, upload in form.file_pairs()
        )
        return {"form": fold_pairs(form.pairs()), "files": files}

    raw = await request.body()
    if not raw:
        return {}
    return {"data": data_url(raw, request.content_type or "application/octet-stream")}


def describe_upload(filename: str, content_type: str, content: bytes) -> dict[str, Any]:
    """Echo entry for one uploaded file: inline text, else a data URL."""
    if is_textual(content_type):
        inline = content.decode("utf-8", errors="replace")
    else:
        inline = data_url(content, content_type)
    return {"size": len(content), "type": content_type, "name": filename, "content": inline}


async def describe_request(request: Request) -> dict[str, Any]:
    """Structured description of *request*, as returned by ``/anything``.

    ``?raw=1`` skips body interpretation: the body comes back as text
    under ``body`` and the edge location metadata under ``cf``.
    """
    description: dict[str, Any] = {
        "args": fold_pairs(request.query.pairs()),
        "headers": request.headers.to_dict(),
        "origin": request.client_ip,
        "url": request.url,
        "method": request.method,
    }
    if request.query.get("raw") == "1":
        description["cf"] = request.geo.to_json()
        description["body"] = await request.text()
        return description

    description.update(await describe_body(request))
    return description


async def anything(request: Request) -> dict[str, Any]:
    return await describe_request(request)


def headers(request: Request) -> dict[str, str]:
    return request.headers.to_dict()


def ip(request: Request) -> dict[str, Any]:
    return {"origin": request.client_ip}


def ipgeo(request: Request) -> dict[str, Any]:
    return {"origin": request.client_ip, **request.geo.to_json()}


def user_agent(request: Request) -> dict[str, str]:
    return {"user-agent": request.headers.get("user-agent") or "unknown"}


def response_headers(request: Request) -> Response:
    """Query pairs become response headers.

    The body folds request headers and query pairs together, so a name
    present in both lists every value, request header first.
    """
    query_pairs = request.query.pairs()
    body = fold_pairs([*request.headers.pairs(), *query_pairs])
    response = Response.json(body)
    for name, value in query_pairs:
        if name.lower() == "content-type":
            response = response.with_content_type(value)
        else:
            response = response.with_header(name, value)
    return response


async def cache(request: Request) -> Response | dict[str, Any]:
    """304 for conditional requests, otherwise an echo."""
    if "if-none-match" in request.headers or "if-modified-since" in request.headers:
        return Response(body=b"", status=304)
    return await describe_request(request)


async def cache_for(request: Request, seconds: str, config: AppConfig) -> Response:
    """Echo with headers that let clients cache the answer for *seconds*."""
    value = string_to_int(seconds, what="seconds")
    if value <= 0:
        raise CustomError(f"seconds must be positive, got {value}", 400)
    value = min(value, config.max_cache_seconds)

    now = datetime.now(UTC)
    return Response.json(await describe_request(request)).with_headers(
        [
            ("Cache-Control", f"public, max-age={value}"),
            ("Expires", format_datetime(now + timedelta(seconds=value), usegmt=True)),
            ("Last-Modified", format_datetime(now, usegmt=True)),
            ("ETag", f'"{uuid.uuid4().hex}"'),
        ]
    )


async def _compressed(request: Request, flag: str, encoding: str, compress: Any) -> Response:
    description = await describe_request(request)
    description[flag] = True
    payload = json.dumps(description, indent=2, ensure_ascii=False).encode("utf-8")
    return Response(
        body=compress(payload),
        content_type=JSON_CONTENT_TYPE,
    ).with_header("Content-Encoding", encoding)


async def gzipped(request: Request) -> Response:
    return await _compressed(request, "gzipped", "gzip", gzip.compress)


async def deflated(request: Request) -> Response:
    # HTTP "deflate" is the zlib format, not raw deflate
    return await _compressed(request, "deflated", "deflate", zlib.compress)


async def brotli_encoded(request: Request) -> Response:
    return await _compressed(request, "brotli", "br", brotli.compress)


def register(app: App) -> None:
    app.route("/get", "/post", "/put", "/delete", "/patch", name="echo")(anything)
    app.route("/anything", "/anything/{rest:path}", name="anything")(anything)
    app.route("/headers", name="headers")(headers)
    app.route("/ip", name="ip")(ip)
    app.route("/ipgeo", name="ipgeo")(ipgeo)
    app.route("/user-agent", name="user_agent")(user_agent)
    app.route("/response-headers", name="response_headers")(response_headers)
    app.route("/cache", name="cache")(cache)
    app.route("/cache/{seconds}", name="cache_for")(cache_for)
    app.route("/gzip", name="gzip")(gzipped)
    app.route("/deflate", name="deflate")(deflated)
    app.route("/brotli", name="brotli")(brotli_encoded)
