"""Terminal chat REPL for Fireworks-hosted models with a web search tool."""
from __future__ import annotations

import argparse
import logging
import readline  # noqa: F401 – side-effect: history & line editing
import sys
from typing import List, Optional

from dotenv import load_dotenv
from rich.panel import Panel

from .config import load_settings
from .core import Conversation, FireworksClient, ToolRegistry
from .core.errors import ConfigError
from .search import WEB_SEARCH_TOOL, GoogleSearch
from .utils import (
    Ansi,
    ERROR_LABEL,
    USER_LABEL,
    configure_logging,
    console,
    err_console,
)

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")
COMMANDS = EXIT_COMMANDS + ("/clear", "/help")

HELP_TEXT = """Commands:
  /clear  - Clear conversation history
  /exit   - Exit the chatbot
  /quit   - Exit the chatbot
  /help   - Show this help message"""


class ChatCLI:
    """High-level orchestration class for the interactive REPL."""

    def __init__(self, conversation: Conversation):
        self.conversation = conversation

    @staticmethod
    def is_command(line: str) -> bool:
        return line.strip() in COMMANDS

    # ---------------- Command handling ---------------

    def handle_command(self, line: str) -> bool:
        """Handle slash commands. Return False to exit REPL."""
        cmd = line.strip()

        if cmd in EXIT_COMMANDS:
            console.print(Ansi.style("Goodbye!", Ansi.FG_YELLOW))
            return False

        if cmd == "/clear":
            self.conversation.reset()
            console.print(Ansi.style("Conversation history cleared.", Ansi.DIM))

        elif cmd == "/help":
            console.print(Ansi.style(HELP_TEXT, Ansi.DIM))

        return True

    # ---------------- Interaction loop ---------------

    def repl(self) -> None:
        """Run the interactive read–eval–print-loop."""
        console.print(Panel.fit("CLI AI Chatbot", style="bold green"))
        console.print(Ansi.style("Type your message or /help for commands", Ansi.DIM))
        console.print()

        try:
            while True:
                try:
                    line = console.input(f"{USER_LABEL}: ").strip()
                except EOFError:
                    console.print()
                    break

                if not line:
                    continue

                if self.is_command(line):
                    if not self.handle_command(line):
                        break
                    continue

                # Input is not read again until the whole turn, tool rounds included, is done.
                self.conversation.submit(line)
        except KeyboardInterrupt:
            console.print(f"\n{Ansi.style('Exiting...', Ansi.FG_YELLOW)}")


# ---------------------------------------------------------------------------
# Entrypoint helpers (keeping it separate simplifies __main__ handling)
# ---------------------------------------------------------------------------

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interactive CLI for Fireworks chat models with web search."
    )
    parser.add_argument("--model", "-m", help="Model name to use (overrides FIREWORKS_MODEL)")
    parser.add_argument(
        "--no-search",
        action="store_true",
        help="Do not offer the web search tool (GOOGLE_SEARCH_API_KEY is then not required)",
    )
    parser.add_argument(
        "--max-rounds",
        type=_positive_int,
        default=None,
        help="Stop a turn after this many tool rounds (default: unlimited)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Run the chat client and return the process exit code."""
    args = _parse_args(argv)
    configure_logging(args.verbose)
    load_dotenv()

    try:
        settings = load_settings(require_search=not args.no_search)
    except ConfigError as exc:
        err_console.print(f"{ERROR_LABEL}: {Ansi.style(str(exc), Ansi.FG_RED)}")
        err_console.print(Ansi.style("Please set the missing key in your environment or .env file", Ansi.DIM))
        return 1

    registry = ToolRegistry()
    search: Optional[GoogleSearch] = None
    if settings.enable_search:
        search = GoogleSearch(settings.google_search_api_key, settings.google_search_cx)
        registry.register(WEB_SEARCH_TOOL, search.handle)

    client = FireworksClient(
        settings.fireworks_api_key,
        registry.definitions,
        model=args.model or settings.model,
        api_url=settings.api_url,
    )
    conversation = Conversation(client, registry, max_rounds=args.max_rounds)

    try:
        ChatCLI(conversation).repl()
    except Exception as exc:  # noqa: BLE001 - last-resort report before exiting
        logger.debug("Fatal error in run loop", exc_info=True)
        err_console.print(f"{ERROR_LABEL}: {Ansi.style(f'Fatal error: {exc}', Ansi.FG_RED)}")
        return 1
    finally:
        client.close()
        if search is not None:
            search.close()
    return 0


def main() -> None:  # pragma: no cover
    sys.exit(run_cli())


if __name__ == "__main__":  # pragma: no cover
    main()
