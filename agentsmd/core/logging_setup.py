"""Logging configuration for the agentsmd command-line tool.

Diagnostics go to stderr through a Rich handler so they never mix with the
generated document. Per-file problems (unreadable files, unlistable
directories, missing ignore files) are only reported at debug level; run
with ``--verbose`` to see them.
"""

from __future__ import annotations

import logging
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

Verbosity = Literal["debug", "info", "warning", "error"]

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(verbosity: Verbosity = "warning") -> logging.Logger:
    """Configure the root logger with a Rich handler on stderr.

    Args:
        verbosity: Console verbosity level (debug, info, warning, error)

    Returns:
        Configured root logger instance
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers when invoked repeatedly (tests, CliRunner)
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(_LEVELS.get(verbosity, logging.WARNING))
    rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root_logger.addHandler(rich_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a named logger for a specific module.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
