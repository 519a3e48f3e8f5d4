"""Logging setup: one rich handler on the package logger, writing to stderr."""

import logging

from rich.logging import RichHandler

from .ansi import err_console

LOGGER_NAME = "fwchat"


def configure_logging(verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Re-running the entry point in one process must not stack handlers.
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
