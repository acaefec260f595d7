"""Process-wide logging configuration.

Stdout is the MCP transport, so every log record goes to stderr.

Environment Variables:
    WALRUS_MCP_LOG_LEVEL: Root log level name (default: "INFO").
"""

from __future__ import annotations

import logging
import os
import sys

WALRUS_MCP_LOG_LEVEL_ENV = "WALRUS_MCP_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(explicit: str | None = None) -> int:
    """Resolve a log level from an explicit name, the environment, or the default.

    Unknown names fall back to INFO.
    """
    name = (explicit or os.environ.get(WALRUS_MCP_LOG_LEVEL_ENV, "") or DEFAULT_LOG_LEVEL)
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger to write to stderr."""
    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
