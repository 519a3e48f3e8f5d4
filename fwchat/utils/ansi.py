"""Colour and styling helpers built on :mod:`rich`."""

import os

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


class Ansi:
    """Lightweight collection of style names used throughout the app."""

    BOLD = "bold"
    DIM = "dim"

    FG_GREEN = "green"
    FG_CYAN = "cyan"
    FG_YELLOW = "yellow"
    FG_RED = "red"

    @staticmethod
    def style(text: str, *codes: str) -> str:
        """Return *text* wrapped in rich markup unless ``NO_COLOR`` is set.

        *text* is escaped, so it may contain square brackets.
        """
        if os.getenv("NO_COLOR") is not None:
            return escape(text)
        style = " ".join(codes)
        return f"[{style}]{escape(text)}[/]"


# Common labels used throughout the application
USER_LABEL = Ansi.style("You", Ansi.FG_CYAN, Ansi.BOLD)
ASSISTANT_LABEL = Ansi.style("AI", Ansi.FG_GREEN, Ansi.BOLD)
ERROR_LABEL = Ansi.style("Error", Ansi.FG_RED, Ansi.BOLD)
