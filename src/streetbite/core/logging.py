"""
Logging setup.

The handler/formatter layout lives in the packaged `streetbite/config/logging.yaml`;
the effective level comes from settings (`app.log_level`, env `STREETBITE_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config
from typing import Any

from streetbite.config.settings import get_logging_config, get_settings


def _with_level(config: dict[str, Any], level: str) -> dict[str, Any]:
    # Deep copy: get_logging_config() is cached and shared between calls.
    out = copy.deepcopy(config)
    out.setdefault("root", {})["level"] = level
    for handler in out.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level
    return out


def configure_logging(level: str | None = None) -> None:
    """Apply the packaged dictConfig at `level` (defaults to the configured log level)."""
    effective = (level or get_settings().app.log_level).upper()
    logging.config.dictConfig(_with_level(get_logging_config(), effective))
