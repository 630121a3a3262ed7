"""Tests for edgebin.http.request: frozen Request with async body access."""

import pytest

from edgebin.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it, {"type": "http.disconnect"})

    return receive


class TestRequestFromASGI:
    def test_basic_fields(self) -> None:
        scope = _make_scope(method="POST", path="/post", query_string=b"a=1")
        request = Request.from_asgi(scope, _make_receive())
        assert request.method == "POST"
        assert request.path == "/post"
        assert request.query.get("a") == "1"
        assert request.client == ("127.0.0.1", 54321)

    def test_cookies_parsed(self) -> None:
        scope = _make_scope(headers=[(b"cookie", b"a=1; b=x=y")])
        request = Request.from_asgi(scope, _make_receive())
        assert request.cookies == {"a": "1", "b": "x=y"}

    def test_websocket_scope_defaults_to_get(self) -> None:
        scope = _make_scope(type="websocket", scheme="ws")
        del scope["method"]
        request = Request.from_asgi(scope, _make_receive())
        assert request.method == "GET"

    def test_frozen(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(AttributeError):
            request.method = "POST"  # type: ignore[misc]


class TestRequestURL:
    def test_url_from_server_with_port(self) -> None:
        scope = _make_scope(path="/get", query_string=b"a=1&b=2")
        request = Request.from_asgi(scope, _make_receive())
        assert request.url == "http://localhost:8000/get?a=1&b=2"

    def test_default_port_omitted(self) -> None:
        scope = _make_scope(path="/get", server=("testserver", 80))
        request = Request.from_asgi(scope, _make_receive())
        assert request.url == "http://testserver/get"

    def test_host_header_wins(self) -> None:
        scope = _make_scope(
            scheme="https", path="/ip", headers=[(b"host", b"edgebin.example")]
        )
        request = Request.from_asgi(scope, _make_receive())
        assert request.url == "https://edgebin.example/ip"


class TestRequestContentType:
    def test_mime_type_strips_parameters(self) -> None:
        scope = _make_scope(headers=[(b"content-type", b"Application/JSON; charset=utf-8")])
        request = Request.from_asgi(scope, _make_receive())
        assert request.mime_type == "application/json"

    def test_default_is_octet_stream(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive())
        assert request.content_type is None
        assert request.mime_type == "application/octet-stream"


class TestRequestClientInfo:
    def test_socket_peer(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive())
        assert request.client_ip == "127.0.0.1"

    def test_cf_connecting_ip_preferred(self) -> None:
        scope = _make_scope(
            headers=[(b"x-forwarded-for", b"10.0.0.1, 10.0.0.2"), (b"cf-connecting-ip", b"1.2.3.4")]
        )
        request = Request.from_asgi(scope, _make_receive())
        assert request.client_ip == "1.2.3.4"

    def test_forwarded_for_first_hop(self) -> None:
        scope = _make_scope(headers=[(b"x-forwarded-for", b"10.0.0.1, 10.0.0.2")])
        request = Request.from_asgi(scope, _make_receive())
        assert request.client_ip == "10.0.0.1"

    def test_geo_cached(self) -> None:
        scope = _make_scope(headers=[(b"cf-timezone", b"Asia/Shanghai")])
        request = Request.from_asgi(scope, _make_receive())
        assert request.geo is request.geo
        assert request.geo.timezone == "Asia/Shanghai"


class TestRequestBody:
    async def test_body_joins_chunks(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive(b"hello ", b"world"))
        assert await request.body() == b"hello world"

    async def test_body_cached(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive(b"once"))
        assert await request.body() == b"once"
        assert await request.body() == b"once"

    async def test_json(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive(b'{"a": [1, 2]}'))
        assert await request.json() == {"a": [1, 2]}

    async def test_invalid_json_raises_value_error(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive(b"{nope"))
        with pytest.raises(ValueError):
            await request.json()

    async def test_text_replaces_undecodable(self) -> None:
        request = Request.from_asgi(_make_scope(), _make_receive(b"ok\xff"))
        assert await request.text() == "ok�"

    async def test_form_urlencoded(self) -> None:
        scope = _make_scope(headers=[(b"content-type", b"application/x-www-form-urlencoded")])
        request = Request.from_asgi(scope, _make_receive(b"a=1&a=2&b=x+y"))
        form = await request.form()
        assert form.pairs() == [("a", "1"), ("a", "2"), ("b", "x y")]
        assert form.get("b") == "x y"
