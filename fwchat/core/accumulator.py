"""Reassembly of tool calls whose pieces arrive across many stream chunks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .messages import ToolCall

logger = logging.getLogger(__name__)


@dataclass
class ToolCallFragment:
    """One ``delta.tool_calls`` entry from a streaming chunk."""

    index: int
    call_id: Optional[str] = None
    name: Optional[str] = None
    arguments_delta: Optional[str] = None

    @classmethod
    def from_delta(cls, delta: Dict[str, Any]) -> Optional["ToolCallFragment"]:
        """Build a fragment from a raw delta entry, or None when it has no index."""
        index = delta.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            return None
        function = delta.get("function")
        if not isinstance(function, dict):
            function = {}
        return cls(
            index=index,
            call_id=_as_str(delta.get("id")),
            name=_as_str(function.get("name")),
            arguments_delta=_as_str(function.get("arguments")),
        )


@dataclass
class PartialToolCall:
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: str = ""


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class ToolCallAccumulator:
    """Assembles complete tool calls from streaming fragments.

    Indices are only meaningful within one streamed response, so a new
    accumulator is used per response.
    """

    def __init__(self) -> None:
        self._pending: Dict[int, PartialToolCall] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def feed(self, fragment: ToolCallFragment) -> None:
        partial = self._pending.setdefault(fragment.index, PartialToolCall())
        # id and name are set once; an empty value never clears them
        if fragment.call_id:
            partial.id = fragment.call_id
        if fragment.name:
            partial.name = fragment.name
        if fragment.arguments_delta:
            partial.arguments += fragment.arguments_delta

    def finalize(self) -> List[ToolCall]:
        """Return completed tool calls in index order."""
        calls: List[ToolCall] = []
        for index in sorted(self._pending):
            partial = self._pending[index]
            if not partial.id or not partial.name:
                logger.debug("Dropping incomplete tool call at index %d: %r", index, partial)
                continue
            calls.append(ToolCall(id=partial.id, name=partial.name, arguments=partial.arguments))
        return calls
