"""Logging setup shared by the CLI commands."""

import logging

from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route package loggers through rich and return the package logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    logger = logging.getLogger("dev_metrics")
    logger.setLevel(level)
    return logger
