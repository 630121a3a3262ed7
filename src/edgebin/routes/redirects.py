"""Redirect routes."""

from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.response import Redirect
from edgebin.parsing import string_to_int


def redirect_to(request: Request) -> Redirect:
    """Redirect to ``url`` with ``status_code`` (302 unless given)."""
    url = request.query.get("url")
    if not url:
        raise CustomError("Missing url query parameter", 400)

    status = 302
    if "status_code" in request.query:
        status = string_to_int(request.query.get("status_code"), what="status_code")
        if not 300 <= status <= 399:
            raise CustomError(f"status_code must be in 300..399, got {status}", 400)
    return Redirect(url, status=status)


def redirect_chain(config: AppConfig, n: str | None = None) -> Redirect:
    """``/redirect/n`` answers 302 to ``/redirect/n-1``; the last hop lands on ``/get``."""
    hops = string_to_int(n, what="redirect count")
    if not 1 <= hops <= config.max_redirects:
        raise CustomError(
            f"Redirect count must be in 1..{config.max_redirects}, got {hops}", 400
        )
    return Redirect("/get" if hops == 1 else f"/redirect/{hops - 1}")


def register(app: App) -> None:
    app.route("/redirect-to", name="redirect_to")(redirect_to)
    app.route("/redirect", "/redirect/{n}", name="redirect")(redirect_chain)
