"""Logging configuration for cofre.

Diagnostics go to stderr through rich so they never mix with command output.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "cofre"

_stderr_console = Console(stderr=True)


def _root_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = RichHandler(console=_stderr_console, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the cofre hierarchy.

    Args:
        name: Module name (e.g., 'cofre.store.queries').

    Returns:
        Logger that emits through the shared rich handler.
    """
    _root_logger()
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_verbose(verbose: bool) -> None:
    """Switch the cofre loggers between WARNING and DEBUG."""
    _root_logger().setLevel(logging.DEBUG if verbose else logging.WARNING)
