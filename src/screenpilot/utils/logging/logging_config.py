"""
Centralized logging configuration.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


NOISY_LIBRARIES = [
    "PIL",
    "pyscreeze",
    "pymsgbox",
    "pytweening",
    "mouseinfo",
    "pyperclip",
]


class NullHandler(logging.Handler):
    """Handler that discards all log records."""

    def emit(self, record):
        pass


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """
    Configure the root logger with a rich handler and silence noisy
    third-party loggers.

    Args:
        verbose: If True, log at DEBUG. Otherwise only warnings and above.
        console: Console to log to (defaults to stderr)
    """
    for logger_name in NOISY_LIBRARIES:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.CRITICAL)
        logger.propagate = False
        logger.handlers = [NullHandler()]

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if isinstance(existing, RichHandler):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    logging.getLogger("screenpilot").setLevel(logging.DEBUG if verbose else logging.INFO)
