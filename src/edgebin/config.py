"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, strict_api=True)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1
    log_level: str = "info"

    # Routing: strict mode answers unmatched paths with a JSON 404
    # instead of looking them up in the asset store.
    strict_api: bool = False

    # Directory overriding the bundled sample assets
    assets_dir: str | Path | None = None

    # Status used for unexpected (non-CustomError) failures
    unexpected_error_status: int = 499

    # Limits
    max_delay: float = 10
    max_bytes: int = 65536
    max_redirects: int = 10
    max_uuids: int = 100
    max_cache_seconds: int = 3600

    # Fallback timezone for the WebSocket "date" command
    default_timezone: str = "UTC"

    # Outbound HTTP
    fetch_timeout: float = 10.0
    telegram_api: str = "https://api.telegram.org"

    # CORS
    cors_allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
    cors_allow_headers: tuple[str, ...] = ("Content-Type", "Authorization")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> AppConfig:
        """Build a config from ``EDGEBIN_*`` environment variables.

        Unset variables keep their defaults. Recognised variables:
        ``EDGEBIN_HOST``, ``EDGEBIN_PORT``, ``EDGEBIN_DEBUG``,
        ``EDGEBIN_WORKERS``, ``EDGEBIN_STRICT``, ``EDGEBIN_ASSETS_DIR``,
        ``EDGEBIN_TIMEZONE``, ``EDGEBIN_LOG_LEVEL``.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("EDGEBIN_HOST", defaults.host),
            port=int(env.get("EDGEBIN_PORT", defaults.port)),
            debug=env.get("EDGEBIN_DEBUG", "").lower() in _TRUTHY,
            workers=int(env.get("EDGEBIN_WORKERS", defaults.workers)),
            log_level=env.get("EDGEBIN_LOG_LEVEL", defaults.log_level),
            strict_api=env.get("EDGEBIN_STRICT", "").lower() in _TRUTHY,
            assets_dir=env.get("EDGEBIN_ASSETS_DIR") or None,
            default_timezone=env.get("EDGEBIN_TIMEZONE", defaults.default_timezone),
        )
