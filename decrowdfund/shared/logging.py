"""
Logging utilities for the DeCrowdFund client.

All loggers hang off the ``decrowdfund`` root logger, which gets a single
stream handler the first time any module asks for a logger. The level comes
from the DCF_LOG_LEVEL environment variable and can be changed at runtime
with set_level() (the console front-end does this for --verbose).
"""

import logging
import os
from typing import Optional, Union

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "decrowdfund"

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_root(use_rich: bool = False) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    if use_rich:
        handler: logging.Handler = RichHandler(
            show_path=False, rich_tracebacks=False
        )
        handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    root.addHandler(handler)

    level_str = os.getenv("DCF_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_str, logging.INFO))
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the ``decrowdfund`` namespace.

    Module names that already start with the package name are used as-is,
    anything else is nested under it so a single handler covers everything.
    """
    _configure_root()
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def use_rich_console() -> None:
    """Swap the plain stream handler for a rich one (console front-end)."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    _configure_root(use_rich=True)


def set_level(level: Union[int, str]) -> None:
    """Override the package log level."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
