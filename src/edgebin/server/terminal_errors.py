"""Terminal formatting for unexpected request failures.

Every exception that is neither a ``CustomError`` nor a routing
``HTTPError`` is logged once through :func:`log_error`. Verbosity comes
from the ``EDGEBIN_TRACEBACK`` environment variable:

- ``compact`` (default): error summary plus the last application frames
- ``full``: the complete Python traceback
- ``minimal``: a single line with the innermost location
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from edgebin.http.request import Request

logger = logging.getLogger("edgebin.server")

# Frames shown in compact mode
_MAX_FRAMES = 5

_STDLIB_PREFIX = os.path.dirname(os.__file__)


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename or filename.startswith("<"):
        return False
    return not filename.startswith(_STDLIB_PREFIX)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus up to five application frames.

    Falls back to the last three frames when none belong to the app.
    """
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-_MAX_FRAMES:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")
    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary with the innermost frame location."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(exc: BaseException, request: Request | None = None, *, status: int = 499) -> None:
    """Log an unexpected error with the configured traceback verbosity.

    Args:
        exc: The exception that escaped a handler.
        request: The request being served, when one exists (WebSocket
            sessions and lifespan hooks may not have one).
        status: The status the client receives, used in the log prefix.
    """
    prefix = f"{status} {request.method} {request.path}" if request is not None else "Server error"

    traceback_style = os.environ.get("EDGEBIN_TRACEBACK", "compact").lower()
    if traceback_style == "full":
        logger.error(prefix, exc_info=exc)
    elif traceback_style == "minimal":
        logger.error("%s: %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
