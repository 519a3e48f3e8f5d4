"""Turn orchestration: stream a response, run requested tools, stream again."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from rich.console import Console

from ..utils import ASSISTANT_LABEL, ERROR_LABEL, Ansi, Spinner, console as default_console
from .client import FireworksClient
from .decoder import TextDelta, ToolCallBatch
from .errors import ChatError, RoundLimitError
from .history import ConversationHistory
from .messages import Message, ToolCall
from .tools import ToolRegistry

logger = logging.getLogger(__name__)


class TurnState(Enum):
    AWAITING_INPUT = "awaiting_input"
    STREAMING = "streaming"
    EXECUTING_TOOLS = "executing_tools"
    IDLE = "idle"


@dataclass
class _RoundBuffer:
    """What one streamed round produced."""

    text: List[str] = field(default_factory=list)
    tool_calls: Tuple[ToolCall, ...] = ()

    @property
    def content(self) -> Optional[str]:
        return "".join(self.text) or None


class Conversation:
    """Owns the history and drives user turns against the completion client.

    Args:
        client: Completion client used for every round.
        registry: Tools the model may call.
        console: Where streamed text and status lines are printed.
        max_rounds: Optional ceiling on streaming rounds per turn; ``None``
            follows tool calls for as long as the model keeps asking.
        spinner: Show a spinner while waiting for each round's first event.
    """

    def __init__(
        self,
        client: FireworksClient,
        registry: ToolRegistry,
        *,
        console: Optional[Console] = None,
        max_rounds: Optional[int] = None,
        spinner: bool = True,
    ):
        self.client = client
        self.registry = registry
        self.console = console or default_console
        self.max_rounds = max_rounds
        self.show_spinner = spinner
        self.state = TurnState.AWAITING_INPUT
        self._history = ConversationHistory()

    @property
    def history(self) -> Tuple[Message, ...]:
        return self._history.snapshot()

    def reset(self) -> None:
        self._history.clear()
        self.state = TurnState.AWAITING_INPUT

    # ------------------------------------------------------------------
    # Turn handling
    # ------------------------------------------------------------------

    def submit(self, text: str) -> Optional[Message]:
        """Run one user turn to completion.

        Returns the final assistant message, or ``None`` when the input was
        blank or the turn failed. A failed turn leaves the history exactly as
        it was before *text* was submitted.
        """
        text = text.strip()
        if not text:
            return None

        checkpoint = len(self._history)
        self._history.add_user_message(text)
        try:
            return self._run_rounds()
        except ChatError as exc:
            self._history.rollback(checkpoint)
            logger.debug("Turn failed, history rolled back to %d messages", checkpoint)
            self.console.print(f"\n{ERROR_LABEL}: {Ansi.style(str(exc), Ansi.FG_RED)}")
            return None
        finally:
            self.state = TurnState.IDLE

    def _run_rounds(self) -> Message:
        rounds = 0
        more_rounds = True
        reply: Optional[Message] = None
        while more_rounds:
            if self.max_rounds is not None and rounds >= self.max_rounds:
                raise RoundLimitError(f"Gave up after {rounds} tool rounds")
            rounds += 1
            logger.debug("Starting round %d", rounds)

            self.state = TurnState.STREAMING
            buffer = self._stream_round()

            # The assistant message declaring the calls must precede their results.
            reply = self._history.add_assistant_message(buffer.content, buffer.tool_calls)
            more_rounds = bool(buffer.tool_calls)
            if more_rounds:
                self.state = TurnState.EXECUTING_TOOLS
                self._execute_tools(buffer.tool_calls)

        self.console.print("\n")
        assert reply is not None
        return reply

    def _stream_round(self) -> _RoundBuffer:
        buffer = _RoundBuffer()
        prefix = f"\n{ASSISTANT_LABEL}: "
        if self.show_spinner:
            spinner = Spinner(prefix=prefix, console=self.console)
        else:
            spinner = None
            self.console.print(prefix, end="")

        if spinner is not None:
            spinner.start()
        try:
            for event in self.client.stream_chat(self._history.snapshot()):
                if spinner is not None:
                    spinner.stop()
                if isinstance(event, TextDelta):
                    self.console.print(event.text, end="", markup=False, highlight=False, soft_wrap=True)
                    buffer.text.append(event.text)
                elif isinstance(event, ToolCallBatch):
                    buffer.tool_calls = event.calls
        finally:
            if spinner is not None:
                spinner.stop()
        return buffer

    def _execute_tools(self, calls: Tuple[ToolCall, ...]) -> None:
        self.console.print("\n")
        self.console.print(Ansi.style("[Executing tools...]", Ansi.DIM))
        for call in calls:
            logger.info("Executing tool call %s (%s)", call.id, call.name)
            result = self.registry.execute(call)
            self._history.add_tool_result(call, result)
