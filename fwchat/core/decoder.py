"""Incremental decoder for the chat-completions server-sent-event stream.

The endpoint answers with lines of the form ``data: {json}`` and finishes
with ``data: [DONE]``. Network chunks rarely line up with those lines, so
bytes are buffered and only complete lines are ever parsed.
"""

from __future__ import annotations

import codecs
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple, Union

from .accumulator import ToolCallAccumulator, ToolCallFragment
from .errors import DecodeError
from .messages import ToolCall

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_TOKEN = "[DONE]"


@dataclass(frozen=True)
class TextDelta:
    """A piece of assistant text, surfaced as soon as it arrives."""

    text: str


@dataclass(frozen=True)
class ToolCallBatch:
    """Every tool call of one response, fully assembled."""

    calls: Tuple[ToolCall, ...] = field(default_factory=tuple)


StreamEvent = Union[TextDelta, ToolCallBatch]


def parse_payload(data: str) -> Dict[str, Any]:
    """Return ``choices[0].delta`` of one event payload.

    Raises:
        DecodeError: if the payload is not JSON or lacks the expected shape.
    """
    try:
        event = json.loads(data)
    except ValueError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(event, dict):
        raise DecodeError("payload is not an object")
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise DecodeError("payload has no choices")
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        raise DecodeError("first choice has no delta")
    return delta


def _split_lines(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield complete lines; an unterminated tail is held until its newline arrives."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""
    for chunk in chunks:
        buffer += decoder.decode(chunk)
        *lines, buffer = buffer.split("\n")
        for line in lines:
            yield line.rstrip("\r")
    buffer += decoder.decode(b"", final=True)
    if buffer:
        logger.debug("Discarding unterminated trailing line: %r", buffer)


def decode_stream(chunks: Iterable[bytes]) -> Iterator[StreamEvent]:
    """Turn raw SSE bytes into text deltas and, at the end, one tool-call batch.

    The returned iterator is single pass. ``chunks`` is closed when the
    iterator finishes, fails or is abandoned.
    """
    accumulator = ToolCallAccumulator()
    try:
        for line in _split_lines(chunks):
            if not line.startswith(DATA_PREFIX):
                continue
            data = line[len(DATA_PREFIX):]
            if data == DONE_TOKEN:
                break
            try:
                delta = parse_payload(data)
            except DecodeError as exc:
                logger.debug("Skipping malformed event (%s): %r", exc, data)
                continue

            tool_deltas = delta.get("tool_calls")
            if isinstance(tool_deltas, list):
                for raw in tool_deltas:
                    fragment = ToolCallFragment.from_delta(raw) if isinstance(raw, dict) else None
                    if fragment is not None:
                        accumulator.feed(fragment)

            content = delta.get("content")
            if isinstance(content, str) and content:
                yield TextDelta(content)

        calls: List[ToolCall] = accumulator.finalize()
        if calls:
            yield ToolCallBatch(tuple(calls))
    finally:
        close = getattr(chunks, "close", None)
        if callable(close):
            close()
