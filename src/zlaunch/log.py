"""Logging configuration for zlaunch."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_LEVEL_ENV = "ZLAUNCH_LOG"

_FORMATTER = logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


def _level_from_env() -> int:
    """Resolve the log level named by ZLAUNCH_LOG, defaulting to INFO."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelNamesMapping().get(name)
    return level if level is not None else logging.INFO


def setup_logging(log_path: Path, *, console: bool = False) -> None:
    """Configure package logger with a rotating file handler and, for the daemon, stderr.

    Idempotent: skips if a handler is already attached.
    """
    root = logging.getLogger("zlaunch")
    if root.handlers:
        return

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(_FORMATTER)
    root.addHandler(handler)

    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(_FORMATTER)
        root.addHandler(stream)

    root.setLevel(_level_from_env())
