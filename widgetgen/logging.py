"""Logging setup shared by the widgetgen CLI and service."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "widgetgen"
_CONSOLE_FORMAT = "[widgetgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``widgetgen`` or its ``widgetgen.<name>`` child."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _formatted(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send widgetgen records to stderr and, when given, to ``log_file``.

    Skipped directories and missing exports are WARNING records, so they
    show at the default level; ``verbose`` adds the per-directory DEBUG
    lines. The file copy carries timestamps and logger names for CI logs.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    logger.addHandler(_formatted(logging.StreamHandler(), _CONSOLE_FORMAT, level))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _formatted(logging.FileHandler(log_file, encoding="utf-8"), _FILE_FORMAT, level)
        )
    return logger


__all__ = ["configure_logging", "get_logger"]
