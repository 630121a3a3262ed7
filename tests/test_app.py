"""Tests for edgebin.app: registration, freezing, injection, lifespan."""

import pytest

from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.errors import NotFound
from edgebin.http.request import Request
from edgebin.testing import TestClient


class _Greeter:
    def __init__(self, greeting: str) -> None:
        self.greeting = greeting


class TestRegistration:
    async def test_route_answers_every_method(self) -> None:
        app = App()

        @app.route("/echo")
        def echo(request: Request) -> dict:
            return {"method": request.method}

        async with TestClient(app) as client:
            for method in ("GET", "POST", "PUT", "DELETE", "PATCH"):
                response = await client.request(method, "/echo")
                assert response.json == {"method": method}

    async def test_several_paths_share_a_handler(self) -> None:
        app = App()

        @app.route("/uuid", "/uuid/{count}")
        def uuids(count: str = "1") -> dict:
            return {"count": count}

        async with TestClient(app) as client:
            assert (await client.get("/uuid")).json == {"count": "1"}
            assert (await client.get("/uuid/5")).json == {"count": "5"}

    async def test_restricted_methods(self) -> None:
        app = App()

        @app.route("/only-get", methods=["get"])
        def only_get() -> str:
            return "ok"

        async with TestClient(app) as client:
            response = await client.post("/only-get")
            assert response.status == 405
            assert response.header("allow") == "GET"

    def test_cannot_register_after_freeze(self) -> None:
        app = App()
        app.route("/a")(lambda: "a")
        assert len(app.routes) == 1
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.route("/b")(lambda: "b")


class TestInjection:
    async def test_provider_by_annotation(self) -> None:
        app = App()
        app.provide(_Greeter, lambda: _Greeter("hello"))

        @app.route("/greet/{name}")
        def greet(name: str, greeter: _Greeter) -> str:
            return f"{greeter.greeting} {name}"

        async with TestClient(app) as client:
            assert (await client.get("/greet/ada")).text == "hello ada"

    async def test_config_is_available(self) -> None:
        app = App(AppConfig(max_uuids=3))
        app.provide(AppConfig, lambda: app.config)

        @app.route("/limit")
        def limit(config: AppConfig) -> dict:
            return {"max": config.max_uuids}

        async with TestClient(app) as client:
            assert (await client.get("/limit")).json == {"max": 3}


class TestFallback:
    async def test_fallback_answers_unmatched(self) -> None:
        app = App()

        @app.fallback
        def fallback(request: Request) -> str:
            return f"fallback for {request.path}"

        async with TestClient(app) as client:
            response = await client.get("/somewhere")
            assert response.status == 200
            assert response.text == "fallback for /somewhere"

    async def test_fallback_may_raise_not_found(self) -> None:
        app = App()

        @app.fallback
        def fallback(request: Request) -> str:
            raise NotFound()

        async with TestClient(app) as client:
            response = await client.get("/missing?x=1")
            assert response.status == 404
            assert response.json == {
                "error": "'http://testserver/missing?x=1' not found",
                "pathname": "/missing",
            }


async def _run_lifespan(app: App, *events: str) -> list[dict]:
    messages = iter([{"type": event} for event in events])
    sent: list[dict] = []

    async def receive() -> dict:
        return next(messages)

    async def send(message: dict) -> None:
        sent.append(message)

    await app({"type": "lifespan"}, receive, send)
    return sent


class TestLifespan:
    async def test_startup_compiles_routes(self) -> None:
        app = App()

        @app.route("/x")
        def x() -> str:
            return "x"

        sent = await _run_lifespan(app, "lifespan.startup", "lifespan.shutdown")
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.route("/y")(x)

    async def test_broken_route_table_fails_startup(self) -> None:
        app = App()
        app.route("/x")(lambda: "one")
        app.route("/x")(lambda: "two")

        sent = await _run_lifespan(app, "lifespan.startup")
        assert len(sent) == 1
        assert sent[0]["type"] == "lifespan.startup.failed"
        assert "Duplicate route" in sent[0]["message"]
