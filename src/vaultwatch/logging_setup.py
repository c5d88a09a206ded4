"""Idempotent logging setup for the vaultwatch logger tree."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_CONFIGURED = False

HANDLER_NAME = "vaultwatch"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Send vaultwatch logs to stderr, or to log_file when given.

    Follow mode redraws the terminal, so it logs to a file instead. Safe to
    call multiple times; only the first call has any effect.
    """
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.set_name(HANDLER_NAME)

    logger = logging.getLogger("vaultwatch")
    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True
