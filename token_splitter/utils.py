"""Shared helpers: package logger, logging setup, file I/O."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

logger = logging.getLogger("token_splitter")

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging; DEBUG when *verbose*, otherwise INFO."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logger.setLevel(level)


def ensure_dir(path: Path) -> Path:
    """Create *path* (and parents) if missing and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def read_text(source: str) -> str:
    """Read UTF-8 text from a file path, or from stdin when *source* is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")
