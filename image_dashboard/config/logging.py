"""Logging helpers."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route library diagnostics to stderr through rich.

    Args:
        verbose: Log at DEBUG instead of WARNING

    Returns:
        The package logger
    """
    logger = logging.getLogger("image_dashboard")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
