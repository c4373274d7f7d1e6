# lovely_docs_mcp/logger.py
"""Package logger. Logs go to stderr, stdout belongs to the stdio transport."""
from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("lovely_docs_mcp")


def setup_logging(level: str | int | None = None) -> None:
    """Configure root logging once for CLI / server processes."""
    if level is None:
        level = os.getenv("LOVELY_DOCS_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)
    logger.setLevel(level)
