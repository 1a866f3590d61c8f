"""
Logging for styleguard.

Reports are the product and go to stdout (or ``--output``); everything the
checker says about itself goes through the ``styleguard`` logger to stderr:
skipped paths and read failures at WARNING, batch totals at INFO, per-file
finding counts and scanner diagnostics at DEBUG. Piping ``styleguard check``
into another tool therefore never mixes log lines into the violation list.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "styleguard"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route styleguard log records to stderr, and optionally to a file.

    Args:
        verbose: DEBUG level, with timestamps and source locations
        quiet: ERROR level only (configuration and internal errors)
        log_file: Also append plain-text records to this file

    Returns:
        The ``styleguard`` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # paths and source snippets contain brackets
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    # force=True: every CLI invocation in one process starts from a clean root
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``styleguard`` namespace (``__name__`` from package modules)."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
