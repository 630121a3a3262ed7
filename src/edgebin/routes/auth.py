"""HTTP authentication challenges: ``/basic-auth`` and ``/bearer``."""

import base64
import binascii
import hmac
from typing import Any

from edgebin.app import App
from edgebin.errors import CustomError
from edgebin.http.request import Request

BASIC_CHALLENGE = ("WWW-Authenticate", 'Basic realm="Fake Realm"')
BEARER_CHALLENGE = ("WWW-Authenticate", "Bearer")


def parse_basic_credentials(authorization: str | None) -> tuple[str, str] | None:
    """Decode ``Basic <base64(user:pass)>``, or ``None`` when malformed.

    The password may itself contain colons; only the first one splits.
    """
    if not authorization:
        return None
    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


def basic_auth(request: Request, user: str, password: str) -> dict[str, Any]:
    credentials = parse_basic_credentials(request.headers.get("authorization"))
    if credentials is None:
        raise CustomError("Missing or malformed Basic credentials", 401, headers=(BASIC_CHALLENGE,))

    given_user, given_password = credentials
    user_ok = hmac.compare_digest(given_user.encode(), user.encode())
    password_ok = hmac.compare_digest(given_password.encode(), password.encode())
    if not (user_ok and password_ok):
        raise CustomError("Invalid credentials", 401, headers=(BASIC_CHALLENGE,))
    return {"authenticated": True, "user": user}


def bearer(request: Request) -> dict[str, Any]:
    scheme, _, token = (request.headers.get("authorization") or "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise CustomError("Missing or malformed Bearer token", 401, headers=(BEARER_CHALLENGE,))
    return {"authenticated": True, "token": token}


def register(app: App) -> None:
    app.route("/basic-auth/{user}/{password}", name="basic_auth")(basic_auth)
    app.route("/bearer", name="bearer")(bearer)
