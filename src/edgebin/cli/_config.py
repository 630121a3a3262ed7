"""Command-line flags layered over ``EDGEBIN_*`` environment settings."""

import argparse
import os
from dataclasses import replace

from edgebin.config import AppConfig

# argparse destination -> AppConfig field
_OVERRIDES = {
    "host": "host",
    "port": "port",
    "workers": "workers",
    "debug": "debug",
    "strict": "strict_api",
    "assets": "assets_dir",
    "log_level": "log_level",
}


def config_from_args(
    args: argparse.Namespace, environ: dict[str, str] | None = None
) -> AppConfig:
    """Build the config from the environment, then apply flags that were given.

    Flags left at ``None`` keep the environment (or default) value.
    """
    config = AppConfig.from_env(os.environ if environ is None else environ)
    changes = {
        field: getattr(args, dest)
        for dest, field in _OVERRIDES.items()
        if getattr(args, dest, None) is not None
    }
    if changes.get("debug"):
        changes.setdefault("log_level", "debug")
        changes["workers"] = 1
    return replace(config, **changes)
