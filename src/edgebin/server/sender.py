"""ASGI response sending: translates Response objects to ASGI messages."""

from edgebin._internal.asgi import Send
from edgebin.http.response import Response

# Framing headers the sender computes itself; handler-set values are dropped
FRAMING_HEADERS = frozenset({b"content-length", b"transfer-encoding"})


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # 1xx, 204 and 304 responses carry no message body
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI send() calls.

    For ``HEAD`` requests the headers (including ``content-length``)
    describe the body that a ``GET`` would return, but no body is sent.
    """
    allowed = body_allowed(response.status)
    raw_headers: list[tuple[bytes, bytes]] = []
    if allowed:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    for name, value in response.headers:
        raw_name = name.lower().encode("latin-1")
        if raw_name in FRAMING_HEADERS:
            continue
        raw_headers.append((raw_name, value.encode("latin-1", errors="replace")))
    raw_headers.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )

    body = response.body_bytes if allowed else b""
    if allowed:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
