"""Logging helpers with consistent formatting.

Everything goes to stderr; the guarded command owns stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler


_LOGGERS: Dict[str, logging.Logger] = {}
_level = logging.INFO


def get_logger(name: str, level: Optional[int] = None, *, rich: bool = True) -> logging.Logger:
    """Configure and return a logger."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = _level if level is None else level
    logger.setLevel(level)

    if rich:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            level=level,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            show_time=True,
            show_path=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s %(name)s %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False
    _LOGGERS[name] = logger
    return logger


def set_level(level: int) -> None:
    """Apply ``level`` to every logger handed out so far and to future ones."""
    global _level
    _level = level
    for logger in _LOGGERS.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def verbosity_to_level(verbosity: int) -> int:
    return logging.DEBUG if verbosity > 0 else logging.INFO
