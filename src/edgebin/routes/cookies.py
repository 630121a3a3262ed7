"""Cookie inspection and manipulation."""

from typing import Any

from edgebin.app import App
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.response import Response

COOKIE_ACTIONS = ("set", "delete")


def cookies(request: Request) -> dict[str, Any]:
    return {"cookies": dict(request.cookies)}


def cookie_action(request: Request, action: str) -> Response:
    """``/cookies/set?k=v`` sets, ``/cookies/delete?k`` expires; both redirect back."""
    if action not in COOKIE_ACTIONS:
        raise CustomError(
            f"Unknown cookie action {action!r}, expected one of: {', '.join(COOKIE_ACTIONS)}",
            400,
        )

    response = Response(body=b"", status=302).with_header("Location", "/cookies")
    for name, value in request.query.pairs():
        if action == "set":
            response = response.with_cookie(name, value)
        else:
            response = response.without_cookie(name)
    return response


def register(app: App) -> None:
    app.route("/cookies", name="cookies")(cookies)
    app.route("/cookies/{action}", name="cookie_action")(cookie_action)
