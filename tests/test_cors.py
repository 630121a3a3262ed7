"""Tests for CORS decoration of every HTTP response."""

from edgebin.app import App
from edgebin.assets import MemoryAssets
from edgebin.config import AppConfig
from edgebin.errors import CustomError
from edgebin.middleware import CORSConfig, CORSMiddleware
from edgebin.routes import create_app
from edgebin.testing import TestClient

METHODS = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
HEADERS = "Content-Type,Authorization"


def _make_app() -> App:
    return create_app(assets=MemoryAssets({"index.html": b"<h1>edgebin</h1>"}))


class TestWithoutOrigin:
    async def test_wildcard(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/get")
            assert response.header("access-control-allow-origin") == "*"
            assert response.header("access-control-allow-methods") == METHODS
            assert response.header("access-control-allow-headers") == HEADERS
            assert response.header("access-control-allow-credentials") is None
            assert response.header("vary") is None


class TestWithOrigin:
    async def test_origin_echoed(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/get", headers={"Origin": "https://app.example"})
            assert response.get_list("access-control-allow-origin") == ["https://app.example"]
            assert response.header("vary") == "Origin"
            assert response.header("access-control-allow-credentials") == "true"


class TestErrorsAreDecorated:
    async def test_custom_error(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/status/abc", headers={"Origin": "https://a.example"})
            assert response.status == 400
            assert response.header("access-control-allow-origin") == "https://a.example"

    async def test_not_found(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/definitely-missing")
            assert response.status == 404
            assert response.header("access-control-allow-origin") == "*"

    async def test_unexpected_error(self) -> None:
        app = App()
        app.add_middleware(CORSMiddleware())

        @app.route("/boom")
        def boom() -> str:
            raise RuntimeError("boom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
            assert response.status == 499
            assert response.header("access-control-allow-origin") == "*"


class TestPreflight:
    async def test_options_short_circuits(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.options(
                "/anything/nested", headers={"Origin": "https://app.example"}
            )
            assert response.status == 204
            assert response.body_bytes == b""
            assert response.header("access-control-allow-origin") == "https://app.example"
            assert response.header("access-control-allow-methods") == METHODS

    async def test_options_on_unknown_path(self) -> None:
        async with TestClient(_make_app()) as client:
            assert (await client.options("/no/such/route")).status == 204


class TestConfig:
    def test_from_app_config(self) -> None:
        config = AppConfig(cors_allow_methods=("GET",), cors_allow_headers=("X-Token",))
        cors = CORSConfig.from_app_config(config)
        assert cors.allow_methods == ("GET",)
        assert cors.allow_headers == ("X-Token",)

    async def test_custom_lists(self) -> None:
        app = App()
        app.add_middleware(CORSMiddleware(CORSConfig(("GET", "POST"), ("X-Token",))))

        @app.route("/x")
        def x() -> str:
            raise CustomError("nope", 400)

        async with TestClient(app) as client:
            response = await client.get("/x")
            assert response.header("access-control-allow-methods") == "GET,POST"
            assert response.header("access-control-allow-headers") == "X-Token"
