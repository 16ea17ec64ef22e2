"""Logging setup for the API process and the maintenance script.

Everything goes to the console and ``info.log``; errors are also kept in
``error.log``. Both files live under ``settings.log_dir``.
"""

import logging
import sys
from pathlib import Path

from sectionforge.core.config import Settings, get_settings

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    return _handler(logging.FileHandler(path, encoding="utf-8"), level, FILE_FORMAT)


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Replace the root logger's handlers with the console and file handlers.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.log_level == "DEBUG" else logging.INFO

    settings.log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    for handler in (
        _file_handler(settings.log_dir / "info.log", logging.INFO),
        _file_handler(settings.log_dir / "error.log", logging.ERROR),
        _handler(logging.StreamHandler(sys.stdout), level, CONSOLE_FORMAT),
    ):
        root_logger.addHandler(handler)

    return root_logger
