"""Tool registry: the name -> handler table the model's tool calls resolve against."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Tuple

from .errors import ToolArgumentError, UnknownCapability
from .messages import ToolCall, ToolDefinition

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], str]


def parse_arguments(raw: str) -> Dict[str, Any]:
    """Parse a tool call's argument string into keyword arguments.

    Raises:
        ToolArgumentError: if *raw* is not a JSON object.
    """
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise ToolArgumentError(raw, str(exc)) from exc
    if not isinstance(parsed, dict):
        raise ToolArgumentError(raw, f"expected an object, got {type(parsed).__name__}")
    return parsed


class ToolRegistry:
    """Fixed mapping from capability name to its definition and handler."""

    def __init__(self) -> None:
        self._tools: Dict[str, Tuple[ToolDefinition, ToolHandler]] = {}

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        if definition.name in self._tools:
            raise ValueError(f"Duplicate tool name: '{definition.name}'")
        self._tools[definition.name] = (definition, handler)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def definitions(self) -> List[ToolDefinition]:
        return [definition for definition, _ in self._tools.values()]

    def arguments_for(self, call: ToolCall) -> Dict[str, Any]:
        """Return the call's arguments, falling back to the raw text when malformed."""
        try:
            return parse_arguments(call.arguments)
        except ToolArgumentError as exc:
            logger.warning("%s; passing raw text to %s", exc, call.name)
            entry = self._tools.get(call.name)
            field_name = entry[0].primary_parameter if entry else None
            return {field_name or "query": call.arguments}

    def dispatch(self, name: str, arguments: Dict[str, Any]) -> str:
        """Run the handler registered under *name*.

        A handler that raises is reported back to the model as text rather
        than aborting the turn.

        Raises:
            UnknownCapability: if no tool is registered under *name*.
        """
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownCapability(name)
        _, handler = entry
        logger.info("Calling %s with %s", name, arguments)
        try:
            return str(handler(arguments))
        except Exception as exc:  # noqa: BLE001 - surfaced to the model instead
            logger.error("Tool %s raised: %s", name, exc)
            return f"Error calling {name}: {exc}"

    def execute(self, call: ToolCall) -> str:
        """Resolve, parse and run one tool call, always producing result text."""
        arguments = self.arguments_for(call)
        try:
            return self.dispatch(call.name, arguments)
        except UnknownCapability as exc:
            logger.warning("%s", exc)
            return str(exc)

