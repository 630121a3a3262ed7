"""Tests for the echo and inspection routes."""

import base64
import gzip
import json
import zlib

import brotli
import pytest

from edgebin.app import App
from edgebin.assets import MemoryAssets
from edgebin.routes import create_app
from edgebin.testing import TestClient


def _make_app() -> App:
    return create_app(assets=MemoryAssets({}))


class TestEcho:
    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH"])
    async def test_method_routes(self, method: str) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.request(method, f"/{method.lower()}?a=1")
            assert response.status == 200
            data = response.json
            assert data["method"] == method
            assert data["args"] == {"a": "1"}
            assert data["url"] == f"http://testserver/{method.lower()}?a=1"
            assert data["origin"] == "127.0.0.1"

    async def test_anything_nested_path(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/anything/deep/nested/path")
            assert response.json["url"] == "http://testserver/anything/deep/nested/path"

    async def test_repeated_args_fold_to_list(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/anything?x=1&y=2&x=3")
            assert response.json["args"] == {"x": ["1", "3"], "y": "2"}

    async def test_headers_echoed(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/anything", headers={"X-Trace": "abc"})
            assert response.json["headers"]["x-trace"] == "abc"

    async def test_origin_from_proxy_header(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/get", headers={"CF-Connecting-IP": "1.2.3.4"})
            assert response.json["origin"] == "1.2.3.4"

    async def test_head_has_no_body(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.head("/get")
            assert response.status == 200
            assert response.body_bytes == b""
            assert int(response.header("content-length")) > 0


class TestEchoBody:
    async def test_json(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/post", json={"a": [1, 2], "b": None})
            assert response.json["json"] == {"a": [1, 2], "b": None}

    async def test_json_with_charset(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post(
                "/post",
                body=b'{"k": "v"}',
                headers={"Content-Type": "application/json; charset=utf-8"},
            )
            assert response.json["json"] == {"k": "v"}

    async def test_invalid_json(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post(
                "/post", body=b"{broken", headers={"Content-Type": "application/json"}
            )
            assert response.status == 400
            assert response.json["code"] == 400
            assert "Invalid JSON" in response.json["message"]

    async def test_empty_json_body_is_null(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/post", headers={"Content-Type": "application/json"})
            assert response.json["json"] is None

    async def test_text(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.put(
                "/put", body="héllo", headers={"Content-Type": "text/plain"}
            )
            assert response.json["data"] == "héllo"

    async def test_urlencoded_form(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/post", data={"a": "1", "b": "two words"})
            data = response.json
            assert data["form"] == {"a": "1", "b": "two words"}
            assert data["files"] == {}

    async def test_multipart(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post(
                "/post",
                data={"name": "edgebin"},
                files={
                    "notes": ("notes.txt", b"plain text", "text/plain"),
                    "pixel": ("p.png", b"\x89PNG", "image/png"),
                },
            )
            data = response.json
            assert data["form"] == {"name": "edgebin"}
            assert data["files"]["notes"] == {
                "size": 10,
                "type": "text/plain",
                "name": "notes.txt",
                "content": "plain text",
            }
            encoded = base64.b64encode(b"\x89PNG").decode()
            assert data["files"]["pixel"]["content"] == f"data:image/png;base64,{encoded}"

    async def test_binary_body_as_data_url(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post(
                "/post", body=b"\x00\x01", headers={"Content-Type": "application/x-thing"}
            )
            assert response.json["data"] == "data:application/x-thing;base64,AAE="

    async def test_untyped_body_defaults_to_octet_stream(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/post", body=b"\xff")
            assert response.json["data"] == "data:application/octet-stream;base64,/w=="

    async def test_empty_binary_body_omitted(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/get")
            assert "data" not in response.json

    async def test_raw_mode(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post(
                "/anything?raw=1",
                body=b'{"not": "parsed"}',
                headers={"Content-Type": "application/json", "CF-IPCountry": "NZ"},
            )
            data = response.json
            assert data["body"] == '{"not": "parsed"}'
            assert "json" not in data
            assert data["cf"]["country"] == "NZ"


class TestInspection:
    async def test_headers(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/headers", headers={"X-A": "1"})
            assert response.json["x-a"] == "1"

    async def test_ip(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/ip", headers={"X-Forwarded-For": "5.6.7.8, 10.0.0.1"})
            assert response.json == {"origin": "5.6.7.8"}

    async def test_ipgeo(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get(
                "/ipgeo", headers={"CF-IPCity": "Oslo", "CF-Timezone": "Europe/Oslo"}
            )
            data = response.json
            assert data["origin"] == "127.0.0.1"
            assert data["city"] == "Oslo"
            assert data["timezone"] == "Europe/Oslo"
            assert "regionCode" in data

    async def test_user_agent(self) -> None:
        async with TestClient(_make_app()) as client:
            assert (await client.get("/user-agent")).json == {"user-agent": "unknown"}
            response = await client.get("/user-agent", headers={"User-Agent": "curl/8"})
            assert response.json == {"user-agent": "curl/8"}


class TestResponseHeaders:
    async def test_query_becomes_headers(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/response-headers?a=1&b=2&c=3&c=4", headers={"C": "5"})
            assert response.header("a") == "1"
            assert response.header("b") == "2"
            assert response.get_list("c") == ["3", "4"]
            assert response.json["c"] == ["5", "3", "4"]
            assert response.json["a"] == "1"

    async def test_framing_headers_not_copied(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get(
                "/response-headers?Content-Length=1&Transfer-Encoding=chunked&x=y"
            )
            assert response.get_list("content-length") == [str(len(response.body_bytes))]
            assert response.get_list("transfer-encoding") == []
            assert response.header("x") == "y"
            assert response.json["Content-Length"] == "1"

    async def test_content_type_override(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/response-headers?content-type=text/plain")
            assert response.content_type == "text/plain"
            assert response.get_list("content-type") == ["text/plain"]


class TestCache:
    async def test_conditional_request(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/cache", headers={"If-None-Match": '"abc"'})
            assert response.status == 304
            assert response.body_bytes == b""

    async def test_plain_request_echoes(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/cache")
            assert response.status == 200
            assert response.json["url"] == "http://testserver/cache"

    async def test_cache_seconds(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/cache/60")
            assert response.header("cache-control") == "public, max-age=60"
            assert response.header("expires").endswith("GMT")
            assert response.header("last-modified").endswith("GMT")
            assert response.header("etag").startswith('"')

    async def test_cache_seconds_capped(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/cache/99999")
            assert response.header("cache-control") == "public, max-age=3600"

    @pytest.mark.parametrize("value", ["0", "-5", "soon"])
    async def test_cache_seconds_invalid(self, value: str) -> None:
        async with TestClient(_make_app()) as client:
            assert (await client.get(f"/cache/{value}")).status == 400


class TestCompression:
    async def test_gzip(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/gzip")
            assert response.header("content-encoding") == "gzip"
            data = json.loads(gzip.decompress(response.body_bytes))
            assert data["gzipped"] is True
            assert data["method"] == "GET"

    async def test_deflate(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/deflate")
            assert response.header("content-encoding") == "deflate"
            assert json.loads(zlib.decompress(response.body_bytes))["deflated"] is True

    async def test_brotli(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/brotli")
            assert response.header("content-encoding") == "br"
            assert json.loads(brotli.decompress(response.body_bytes))["brotli"] is True
