"""In-memory conversation history."""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from .messages import Message, ToolCall


class ConversationHistory:
    """Ordered log of the messages exchanged in the current session.

    Only the owning :class:`~fwchat.core.conversation.Conversation` appends to
    it. Everything else gets :meth:`snapshot`, an immutable tuple.
    """

    def __init__(self, messages: Optional[Sequence[Message]] = None) -> None:
        self._messages: List[Message] = list(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())

    def snapshot(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def add_user_message(self, content: str) -> Message:
        return self._append(Message(role="user", content=content))

    def add_assistant_message(
        self, content: Optional[str], tool_calls: Sequence[ToolCall] = ()
    ) -> Message:
        return self._append(Message(role="assistant", content=content or None, tool_calls=tuple(tool_calls)))

    def add_tool_result(self, call: ToolCall, content: str) -> Message:
        return self._append(
            Message(role="tool", content=content, tool_call_id=call.id, name=call.name)
        )

    def rollback(self, length: int) -> None:
        """Drop every message appended after the history had *length* entries."""
        del self._messages[length:]

    def clear(self) -> None:
        self._messages.clear()

    def _append(self, message: Message) -> Message:
        self._messages.append(message)
        return message
