from .ansi import (
    Ansi,
    USER_LABEL,
    ASSISTANT_LABEL,
    ERROR_LABEL,
    console,
    err_console,
)
from .logging import configure_logging
from .spinner import Spinner

__all__ = [
    "Ansi",
    "USER_LABEL",
    "ASSISTANT_LABEL",
    "ERROR_LABEL",
    "console",
    "err_console",
    "configure_logging",
    "Spinner",
]
