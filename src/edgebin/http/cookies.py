"""Cookie parsing and Set-Cookie serialization.

The read side (``parse_cookies``) backs ``Request.cookies`` and the
``/cookies`` route; the write side (``SetCookie``) backs
``/cookies/set`` and ``/cookies/delete``.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote

# Expiry used when deleting a cookie
EPOCH_HTTP_DATE = "Thu, 01 Jan 1970 00:00:00 GMT"

# RFC 6265 cookie-octets other than alphanumerics and "_.-~"; everything
# else (space, quote, comma, semicolon, backslash, percent, non-ASCII) is
# percent-encoded
_COOKIE_SAFE = "!#$&'()*+/:<=>?@[]^`{|}"


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Values may themselves contain ``=``; only the first one splits.
    Percent-escapes are decoded, undoing ``SetCookie`` encoding.
    Returns an empty dict for empty or missing headers.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        pair = pair.strip()
        if not pair:
            continue
        key, _, value = pair.partition("=")
        cookies[key.strip()] = unquote(value.strip())
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response."""

    name: str
    value: str
    max_age: int | None = None
    expires: str | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = False
    samesite: str | None = None

    @classmethod
    def expired(cls, name: str, path: str = "/") -> SetCookie:
        """A directive that makes the client drop cookie *name*."""
        return cls(name=name, value="", max_age=0, expires=EPOCH_HTTP_DATE, path=path)

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={quote(self.value, safe=_COOKIE_SAFE)}"]
        if self.expires is not None:
            parts.append(f"Expires={self.expires}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        return "; ".join(parts)
