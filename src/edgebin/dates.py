"""Date formatting for ``/date`` and the WebSocket ``date`` command.

Four formats are supported:

- ``iso``: ISO 8601 in the requested zone, millisecond precision
- ``locale``: CLDR medium date-time pattern of the requested locale (Babel)
- ``utc``: RFC 7231 HTTP date, always GMT
- ``ts``: Unix epoch in milliseconds

Unknown formats fall back to ``iso``. Unknown zones or locales are a
client error.
"""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import format_datetime as http_date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from babel import Locale, UnknownLocaleError
from babel.dates import format_datetime

from edgebin.errors import CustomError

FORMATS = ("iso", "locale", "utc", "ts")
DEFAULT_LOCALE = "en-US"


def resolve_timezone(name: str) -> ZoneInfo:
    """Look up an IANA zone such as ``Asia/Shanghai``.

    Raises:
        CustomError: The zone does not exist.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise CustomError(f"Unknown timeZone: {name!r}", 400) from None


def resolve_locale(tag: str) -> Locale:
    """Parse a BCP 47 tag (``en-US``) or POSIX name (``en_US``).

    Raises:
        CustomError: The locale is malformed or unknown to CLDR.
    """
    sep = "-" if "-" in tag else "_"
    try:
        return Locale.parse(tag, sep=sep)
    except (UnknownLocaleError, ValueError, TypeError):
        raise CustomError(f"Unknown locale: {tag!r}", 400) from None


def format_date(
    *,
    fmt: str = "iso",
    timezone: str = "UTC",
    locale: str = DEFAULT_LOCALE,
    now: datetime | None = None,
) -> str | int:
    """Format *now* (default: the current instant) as requested."""
    zone = resolve_timezone(timezone)
    moment = (now or datetime.now(UTC)).astimezone(zone)

    match fmt:
        case "ts":
            return int(moment.timestamp() * 1000)
        case "utc":
            return http_date(moment.astimezone(UTC), usegmt=True)
        case "locale":
            return format_datetime(
                moment, format="medium", tzinfo=zone, locale=resolve_locale(locale)
            )
        case _:
            return moment.isoformat(timespec="milliseconds")
