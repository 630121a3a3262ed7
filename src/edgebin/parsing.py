"""Value parsing helpers shared by the routes.

Path segments and query values arrive as strings; these helpers turn
them into numbers or reject them with a ``CustomError`` (400) whose
message names the offending input.
"""

import base64
import math
import re

from edgebin.errors import CustomError

_INT_RE = re.compile(r"[+-]?\d+")


def string_to_number(value: str | None, *, what: str = "number") -> int | float:
    """Parse *value* as a finite number.

    Integers stay ``int``; anything with a fraction or exponent becomes
    ``float``. Surrounding whitespace is ignored.

    Raises:
        CustomError: *value* is missing, empty, not numeric, NaN or infinite.
    """
    if value is None or not value.strip():
        raise CustomError(f"Missing {what}", 400)
    text = value.strip()
    if _INT_RE.fullmatch(text):
        return int(text)
    try:
        number = float(text)
    except ValueError:
        raise CustomError(f"Invalid {what}: {value!r}", 400) from None
    if not math.isfinite(number):
        raise CustomError(f"Invalid {what}: {value!r}", 400)
    return number


def string_to_int(value: str | None, *, what: str = "number") -> int:
    """Like :func:`string_to_number` but only whole numbers pass."""
    number = string_to_number(value, what=what)
    if isinstance(number, float):
        raise CustomError(f"Invalid {what}: {value!r} is not an integer", 400)
    return number


def data_url(content: bytes, content_type: str) -> str:
    """Encode *content* as a ``data:`` URL."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def is_textual(content_type: str) -> bool:
    """Whether a content type is a ``text`` flavour that can be inlined."""
    return "text" in content_type.lower()
