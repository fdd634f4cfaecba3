"""Logging configuration for hosts embedding photo-timeline."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

LOGGER_NAME = "photo_timeline"

CONSOLE_FORMAT = "%(asctime)s [%(levelname)-7s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


def _console_handler(verbose: bool, stream: Optional[TextIO]) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(
    verbose: bool = False,
    log_dir: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> str:
    """Route photo_timeline log records to a console stream and optional file.

    The console handler (``stream``, default stdout) logs INFO, or DEBUG when
    ``verbose``. With ``log_dir`` a DEBUG log named after the run id is
    written there as well, so per-photo resolution decisions can be traced
    after a large build. Calling this again replaces the handlers installed
    earlier.

    Returns the run_id string (e.g. 'photo-timeline_20260216_143022').
    """
    run_id = f"photo-timeline_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.addHandler(_console_handler(verbose, stream))
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(_file_handler(log_dir / f"{run_id}.log"))

    return run_id
