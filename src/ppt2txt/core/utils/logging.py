"""Logging setup shared by the CLI and the library modules."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "PPT2TXT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


def resolve_log_level(verbose: bool = False, env: Optional[dict] = None) -> int:
    """-v wins, then $PPT2TXT_LOG_LEVEL, then WARNING."""
    if verbose:
        return logging.DEBUG
    env = os.environ if env is None else env
    name = str(env.get(LOG_LEVEL_ENV, "") or "").strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(level: int = logging.WARNING) -> None:
    """Route the package logger to stderr; stdout may carry the report."""
    logger = logging.getLogger("ppt2txt")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
