"""``/mix``: echo the body with a chosen status, delay and headers.

``/mix?s=201&d=1&h=x-foo:bar&h=x-baz:qux`` answers 201 after one
second with both headers set. Header entries without a name before the
first ``:`` are skipped.
"""

import asyncio

from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.response import Response
from edgebin.parsing import string_to_int, string_to_number


def parse_header_specs(values: list[str]) -> list[tuple[str, str]]:
    headers: list[tuple[str, str]] = []
    for value in values:
        index = value.find(":")
        if index <= 0:
            continue
        name, content = value[:index].strip(), value[index + 1 :].strip()
        if name:
            headers.append((name, content))
    return headers


async def mix(request: Request, config: AppConfig) -> Response:
    query = request.query

    status = 200
    if "s" in query:
        status = string_to_int(query.get("s"), what="status code")
        if not 200 <= status <= 599:
            raise CustomError(f"Status code must be in 200..599, got {status}", 400)

    if "d" in query:
        delay = string_to_number(query.get("d"), what="delay")
        if delay < 0:
            raise CustomError(f"Delay must not be negative, got {delay}", 400)
        await asyncio.sleep(min(delay, config.max_delay))

    response = Response(
        body=await request.body(),
        status=status,
        content_type=request.content_type or "text/plain; charset=utf-8",
    )
    return response.with_headers(parse_header_specs(query.get_list("h")))


def register(app: App) -> None:
    app.route("/mix", name="mix")(mix)
