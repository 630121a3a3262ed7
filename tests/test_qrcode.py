"""Tests for /qrcode."""

import pytest

from edgebin.app import App
from edgebin.assets import MemoryAssets
from edgebin.routes import create_app
from edgebin.routes.qrcode import render_svg
from edgebin.testing import TestClient


def _make_app() -> App:
    return create_app(assets=MemoryAssets({}))


class TestRenderSvg:
    def test_svg_document(self) -> None:
        svg = render_svg("hello")
        assert svg.startswith(b"<svg")
        assert b"<?xml" not in svg

    def test_width_scales_output(self) -> None:
        assert render_svg("hello", width=100) != render_svg("hello", width=800)

    def test_scale_without_width(self) -> None:
        assert render_svg("hello", width=None, scale=2) != render_svg("hello", width=None, scale=8)

    def test_margin_and_colors_change_output(self) -> None:
        plain = render_svg("hello")
        assert render_svg("hello", margin=0) != plain
        assert render_svg("hello", dark="#ff0000", light="#00ff0080") != plain

    def test_unknown_color(self) -> None:
        with pytest.raises(ValueError):
            render_svg("hello", dark="notacolor")


class TestQRCode:
    async def test_defaults(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/qrcode")
            assert response.status == 200
            assert response.content_type == "image/svg+xml"
            assert response.header("cache-control") == "public, max-age=3600"
            assert response.body_bytes.startswith(b"<svg")

    async def test_custom_text_and_level(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get(
                "/qrcode?text=https%3A%2F%2Fexample.com&errorCorrectionLevel=l&width=120"
            )
            assert response.status == 200
            assert response.body_bytes == render_svg("https://example.com", error="L", width=120)

    @pytest.mark.parametrize(
        "query",
        [
            "type=png",
            "errorCorrectionLevel=X",
            "width=0",
            "width=-10",
            "width=wide",
            "scale=0",
            "scale=-2",
            "margin=-1",
            "margin=1.5",
            "color.dark=notacolor",
            "color.light=%23zzz",
        ],
    )
    async def test_rejected(self, query: str) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get(f"/qrcode?{query}")
            assert response.status == 400
            assert response.json["code"] == 400

    async def test_text_too_long(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/qrcode?text=" + "x" * 5000)
            assert response.status == 400
            assert "does not fit" in response.json["message"]

    async def test_render_options(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get(
                "/qrcode?text=hi&margin=1&color.dark=%23ff0000&color.light=00000000"
            )
            assert response.status == 200
            assert response.body_bytes == render_svg(
                "hi", margin=1, dark="#ff0000", light="#00000000"
            )

    async def test_scale_option(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/qrcode?text=hi&scale=2.5")
            assert response.body_bytes == render_svg("hi", width=None, scale=2.5)

    async def test_width_wins_over_scale(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/qrcode?text=hi&width=200&scale=9")
            assert response.body_bytes == render_svg("hi", width=200)
