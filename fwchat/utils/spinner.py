"""Spinner shown while waiting for the first streamed event."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from yaspin import yaspin

from .ansi import console as default_console


class Spinner:
    """Display a small spinner next to a prefix while work is done.

    The prefix is always printed; the animation itself only runs when the
    console is attached to a terminal.
    """

    def __init__(self, prefix: str = "", console: Optional[Console] = None):
        self._prefix = prefix
        self._console = console or default_console
        self._started = False
        # spinner after the text so prefix stays at the start
        self._spinner = yaspin(text="", side="right") if self._console.is_terminal else None

    def start(self) -> None:
        if self._started:
            return
        self._console.print(self._prefix, end="")
        self._console.file.flush()
        if self._spinner is not None:
            self._spinner.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        if self._spinner is not None:
            self._spinner.stop()
            self._console.print(f"\r{self._prefix}", end="")
            self._console.file.flush()
        self._started = False

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
